"""
LoaderFactory - Selects the knowledge-base loader for a file by extension.

Supports JSON, YAML, TOML, S-expression, Markdown, reStructuredText, plain
text and PDF sources.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Type

from ergo_kb_core.exceptions import ValidationError
from ergo_kb_core.loaders.base import BaseLoader, PathLike
from ergo_kb_core.loaders.json_loader import JSONLoader
from ergo_kb_core.loaders.markdown_loader import MarkdownLoader
from ergo_kb_core.loaders.pdf_loader import PDFLoader
from ergo_kb_core.loaders.rst_loader import RSTLoader
from ergo_kb_core.loaders.sexp_loader import SExpLoader
from ergo_kb_core.loaders.text_loader import TextLoader
from ergo_kb_core.loaders.toml_loader import TOMLLoader
from ergo_kb_core.loaders.yaml_loader import YAMLLoader
from ergo_kb_core.utils import get_logger

LOADER_CLASSES: List[Type[BaseLoader]] = [
    JSONLoader,
    YAMLLoader,
    TOMLLoader,
    SExpLoader,
    MarkdownLoader,
    RSTLoader,
    TextLoader,
    PDFLoader,
]


class LoaderFactory:
    """
    Factory for creating the loader matching a file's extension.

    Typical usage::

        factory = LoaderFactory()
        chunks = factory.get_loader("knowledge_base.yaml").load("knowledge_base.yaml")
    """

    def __init__(self) -> None:
        self.logger = get_logger(__name__)
        self._by_extension: Dict[str, Type[BaseLoader]] = {
            extension: loader_cls
            for loader_cls in LOADER_CLASSES
            for extension in loader_cls.extensions
        }

    @property
    def supported_extensions(self) -> List[str]:
        return sorted(self._by_extension)

    def detect_file_type(self, file_path: PathLike) -> str:
        """
        Return the lowercase extension of ``file_path``, including the dot.

        Raises:
            ValidationError: If ``file_path`` is None or empty
        """
        if file_path is None or (isinstance(file_path, str) and file_path.strip() == ""):
            raise ValidationError(
                message="File path cannot be empty",
                error_code="VAL_001",
                details={"file_path": file_path},
            )
        return Path(str(file_path)).suffix.lower()

    def is_supported(self, file_path: PathLike) -> bool:
        return self.detect_file_type(file_path) in self._by_extension

    def get_loader(self, file_path: PathLike, **options) -> BaseLoader:
        """
        Return a loader instance for ``file_path``.

        Keyword options are passed to the loader constructor.

        Raises:
            ValidationError: If the path is empty or the extension is unsupported
        """
        extension = self.detect_file_type(file_path)
        loader_cls: Optional[Type[BaseLoader]] = self._by_extension.get(extension)

        if loader_cls is None:
            raise ValidationError(
                message=f"Unsupported knowledge-base format '{extension or '<none>'}'",
                error_code="VAL_004",
                details={
                    "file_path": str(file_path),
                    "supported": self.supported_extensions,
                },
            )

        self.logger.debug(
            "loader_selected",
            file_path=str(file_path),
            extension=extension,
            loader_type=loader_cls.__name__,
        )
        return loader_cls(**options)
