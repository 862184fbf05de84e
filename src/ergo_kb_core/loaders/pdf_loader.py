"""
PDFLoader - Reads the knowledge base from a PDF rendering.

Text is extracted page by page with PyMuPDF, cleaned line by line, and then
split with the plain-text ``[section_id]`` convention.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

import fitz  # type: ignore[import-untyped]

from ergo_kb_core.exceptions import ProcessingError
from ergo_kb_core.loaders.base import BaseLoader, PathLike
from ergo_kb_core.loaders.text_loader import split_text_sections
from ergo_kb_core.models import Chunk


class PDFLoader(BaseLoader):
    extensions = (".pdf",)
    format_name = "pdf"

    def load(self, file_path: PathLike) -> List[Chunk]:
        path = Path(file_path)
        self._validate_path(path)
        text = self.extract_text(path)
        chunks = self.parse(text, source=str(path))

        self.logger.info(
            "file_loaded",
            path=str(path),
            format=self.format_name,
            chunk_count=len(chunks),
        )
        return chunks

    def parse(self, text: str, source: str = "<memory>") -> List[Chunk]:
        return split_text_sections(text, source)

    def extract_text(self, path: Path) -> str:
        """
        Extract cleaned text from every page.

        Raises:
            ProcessingError: If the PDF is encrypted or cannot be read
        """
        try:
            with fitz.open(str(path)) as document:
                if getattr(document, "is_encrypted", False) or getattr(
                    document, "needs_password", False
                ):
                    raise ProcessingError(
                        message="Encrypted PDF requires a password",
                        error_code="PROC_002",
                        details={"file_path": str(path)},
                    )

                pages: List[str] = []
                for index in range(document.page_count):
                    self.logger.debug(
                        "pdf_page_extracted",
                        page_number=index + 1,
                        total_pages=document.page_count,
                        file=str(path),
                    )
                    cleaned = self._clean_text(document.load_page(index).get_text("text") or "")
                    if cleaned:
                        pages.append(cleaned)

                return "\n".join(pages)
        except ProcessingError:
            raise
        except Exception as exc:
            self.logger.error("pdf_processing_failed", file=str(path), error=str(exc))
            raise ProcessingError(
                message=f"Failed to read PDF: {exc}",
                error_code="PROC_002",
                details={"file_path": str(path)},
                original_exception=exc,
            ) from exc

    def _clean_text(self, text: str) -> str:
        lines = (" ".join(line.split()) for line in text.splitlines())
        return "\n".join(line for line in lines if line)
