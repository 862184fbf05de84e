"""
Knowledge base access - bundled ErgoScript content and file/corpus loading.

The package ships the same logical sections in several serializations
under ``ergo_kb_core/data``. Each file loads into its own ChunkIndex; the
formats restate one another, so a corpus is a mapping of file name to
index rather than one merged index.

License: MIT
"""

from __future__ import annotations

from importlib import resources
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from ergo_kb_core.config import settings
from ergo_kb_core.exceptions import ValidationError
from ergo_kb_core.index import ChunkIndex
from ergo_kb_core.loaders import LoaderFactory
from ergo_kb_core.utils import get_logger

SECTION_IDS = (
    "core_references",
    "eutxo_model",
    "known_issues",
    "secure_patterns_index",
    "resource_paths",
    "agent_behavior_rules",
    "llm_usage_notes",
    "audit_examples",
)
OPTIONAL_SECTION_IDS = ("audit_examples",)
REQUIRED_SECTION_IDS = tuple(s for s in SECTION_IDS if s not in OPTIONAL_SECTION_IDS)

BUNDLED_FILES = {
    "json": "knowledge_base.json",
    "rag": "rag_chunks.json",
    "yaml": "knowledge_base.yaml",
    "toml": "knowledge_base.toml",
    "sexp": "knowledge_base.sexp",
    "md": "knowledge_base.md",
    "rst": "knowledge_base.rst",
    "txt": "knowledge_base.txt",
}

PathLike = Union[str, Path]


def bundled_data_dir() -> Path:
    """Directory holding the bundled knowledge-base files."""
    return Path(str(resources.files("ergo_kb_core") / "data"))


def bundled_path(fmt: str) -> Path:
    """
    Path of the bundled file for ``fmt`` (``json``, ``yaml``, ``md``...).

    Raises:
        ValidationError: If no bundled file exists for ``fmt``
    """
    key = fmt.lower().lstrip(".")
    if key in ("yml",):
        key = "yaml"
    if key in ("markdown",):
        key = "md"
    if key not in BUNDLED_FILES:
        raise ValidationError(
            message=f"No bundled knowledge base in format '{fmt}'",
            error_code="VAL_004",
            details={"format": fmt, "available": sorted(BUNDLED_FILES)},
        )
    return bundled_data_dir() / BUNDLED_FILES[key]


def load_index(path: PathLike, factory: Optional[LoaderFactory] = None, **options) -> ChunkIndex:
    """
    Load one knowledge-base file into a ChunkIndex.

    Raises:
        ValidationError: Unsupported format, invalid records, duplicate ids
        ProcessingError: File cannot be read or parsed
    """
    factory = factory or LoaderFactory()
    chunks = factory.get_loader(path, **options).load(path)
    return ChunkIndex(chunks, source=str(path))


def load_files(paths: Iterable[PathLike]) -> ChunkIndex:
    """
    Load several files holding different sections into one index.

    Raises:
        ValidationError: If an id appears in more than one file
    """
    factory = LoaderFactory()
    return ChunkIndex.merge(load_index(path, factory) for path in paths)


def load_corpus(directory: Optional[PathLike] = None) -> Dict[str, ChunkIndex]:
    """
    Load every supported file in ``directory`` (sorted by name).

    Defaults to ``settings.kb_dir`` or the bundled data directory.
    Unsupported files are skipped.

    Raises:
        ValidationError: If the directory does not exist or holds no supported file
    """
    if directory is None:
        directory = settings.kb_dir or bundled_data_dir()
    root = Path(directory)

    if not root.is_dir():
        raise ValidationError(
            message=f"Knowledge-base directory does not exist: {root}",
            error_code="VAL_004",
            details={"directory": str(root)},
        )

    logger = get_logger(__name__)
    factory = LoaderFactory()
    corpus: Dict[str, ChunkIndex] = {}

    for path in sorted(p for p in root.iterdir() if p.is_file()):
        if not factory.is_supported(path):
            logger.debug("file_skipped", path=str(path), reason="unsupported_extension")
            continue
        corpus[path.name] = load_index(path, factory)

    if not corpus:
        raise ValidationError(
            message=f"No knowledge-base files found in {root}",
            error_code="VAL_004",
            details={"directory": str(root), "supported": factory.supported_extensions},
        )

    logger.info("corpus_loaded", directory=str(root), file_count=len(corpus))
    return corpus


def load_default_index(fmt: Optional[str] = None) -> ChunkIndex:
    """
    Load the knowledge base in ``fmt`` (default ``settings.default_format``).

    When ``settings.kb_dir`` is set, the file of the same name is read from
    there instead of the bundled copy.
    """
    bundled = bundled_path(fmt or settings.default_format)
    if settings.kb_dir:
        return load_index(Path(settings.kb_dir) / bundled.name)
    return load_index(bundled)


def missing_sections(
    index: ChunkIndex, required: Iterable[str] = REQUIRED_SECTION_IDS
) -> List[str]:
    return [section for section in required if section not in index]


def check_required_sections(
    index: ChunkIndex, required: Iterable[str] = REQUIRED_SECTION_IDS
) -> None:
    """
    Raises:
        ValidationError: Naming the first required section missing from ``index``
    """
    missing = missing_sections(index, required)
    if missing:
        raise ValidationError(
            message=f"Required section '{missing[0]}' missing from {index.source}",
            error_code="VAL_005",
            details={"chunk_id": missing[0], "missing": missing, "source": index.source},
        )
