"""
JSONLoader - Reads knowledge-base JSON files.

Accepts the record list, ``{"chunks": [...]}`` (rag_chunks.json) and section
mapping layouts described in :mod:`ergo_kb_core.loaders.records`.
"""

from __future__ import annotations

import json
from typing import List

from ergo_kb_core.exceptions import ProcessingError
from ergo_kb_core.loaders.base import BaseLoader
from ergo_kb_core.loaders.records import chunks_from_data
from ergo_kb_core.models import Chunk


class JSONLoader(BaseLoader):
    extensions = (".json",)
    format_name = "json"

    def parse(self, text: str, source: str = "<memory>") -> List[Chunk]:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ProcessingError(
                message=f"Invalid JSON in {source}: {exc.msg} (line {exc.lineno})",
                error_code="PROC_003",
                details={"source": source, "line": exc.lineno, "column": exc.colno},
                original_exception=exc,
            ) from exc

        return chunks_from_data(data, source=source)
