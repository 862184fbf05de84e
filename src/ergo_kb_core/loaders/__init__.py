"""
Loaders package - Readers for every knowledge-base serialization.

Main Components:
    LoaderFactory: Picks the loader for a path by extension
    JSONLoader, YAMLLoader, TOMLLoader, SExpLoader: Structured formats
    MarkdownLoader, RSTLoader, TextLoader, PDFLoader: Document formats

Example:
    ```python
    from ergo_kb_core.loaders import LoaderFactory

    chunks = LoaderFactory().get_loader("kb.toml").load("kb.toml")
    ```
"""

from ergo_kb_core.loaders.base import BaseLoader
from ergo_kb_core.loaders.factory import LOADER_CLASSES, LoaderFactory
from ergo_kb_core.loaders.json_loader import JSONLoader
from ergo_kb_core.loaders.markdown_loader import MarkdownLoader
from ergo_kb_core.loaders.pdf_loader import PDFLoader
from ergo_kb_core.loaders.records import chunks_from_data, render_content
from ergo_kb_core.loaders.rst_loader import RSTLoader
from ergo_kb_core.loaders.sexp_loader import SExpLoader, read_sexp
from ergo_kb_core.loaders.text_loader import TextLoader
from ergo_kb_core.loaders.toml_loader import TOMLLoader
from ergo_kb_core.loaders.yaml_loader import YAMLLoader

__all__ = [
    "BaseLoader",
    "LoaderFactory",
    "LOADER_CLASSES",
    "JSONLoader",
    "YAMLLoader",
    "TOMLLoader",
    "SExpLoader",
    "MarkdownLoader",
    "RSTLoader",
    "TextLoader",
    "PDFLoader",
    "chunks_from_data",
    "render_content",
    "read_sexp",
]
