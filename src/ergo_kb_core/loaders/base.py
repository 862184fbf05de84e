"""
BaseLoader - Shared file handling for knowledge-base loaders.

Subclasses declare the extensions they read and implement ``parse()``.

License: MIT
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ergo_kb_core.config import settings
from ergo_kb_core.exceptions import ProcessingError, ValidationError
from ergo_kb_core.models import Chunk
from ergo_kb_core.utils import get_logger

PathLike = Union[str, Path]


class BaseLoader(ABC):
    """Reads one serialization of the knowledge base into Chunk records."""

    #: Lowercase file extensions, including the leading dot.
    extensions: Tuple[str, ...] = ()
    format_name: str = ""

    def __init__(self, max_file_size: Optional[int] = None) -> None:
        self.logger = get_logger(__name__)
        self.max_file_size = max_file_size if max_file_size is not None else settings.max_file_size

    def load(self, file_path: PathLike) -> List[Chunk]:
        """
        Read and parse ``file_path``.

        Raises:
            ValidationError: If the path is missing, too large, or has the wrong extension
            ProcessingError: If the file cannot be decoded or parsed
        """
        path = Path(file_path)
        self._validate_path(path)
        text = self._read_text(path)
        chunks = self.parse(text, source=str(path))

        self.logger.info(
            "file_loaded",
            path=str(path),
            format=self.format_name,
            chunk_count=len(chunks),
        )
        return chunks

    @abstractmethod
    def parse(self, text: str, source: str = "<memory>") -> List[Chunk]:
        """Parse document text into chunks, in document order."""

    def _validate_path(self, path: Path) -> None:
        if not path.is_file():
            raise ValidationError(
                message=f"Knowledge-base file does not exist: {path}",
                error_code="VAL_004",
                details={"file_path": str(path)},
            )

        if self.extensions and path.suffix.lower() not in self.extensions:
            raise ValidationError(
                message=f"{self.format_name} loader expects one of {list(self.extensions)}",
                error_code="VAL_004",
                details={"file_path": str(path), "extension": path.suffix.lower()},
            )

        size = path.stat().st_size
        if size > self.max_file_size:
            raise ValidationError(
                message=f"File {path} is {size} bytes, limit is {self.max_file_size}",
                error_code="VAL_004",
                details={"file_path": str(path), "size": size},
            )

    def _read_text(self, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            self.logger.error("file_read_failed", path=str(path), error=str(exc))
            raise ProcessingError(
                message=f"Could not read {path}: {exc}",
                error_code="PROC_001",
                details={"file_path": str(path)},
                original_exception=exc,
            ) from exc
