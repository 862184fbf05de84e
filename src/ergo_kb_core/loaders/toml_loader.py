"""
TOMLLoader - Reads knowledge-base TOML files.

Records are written as ``[[chunks]]`` tables; section layouts use one table
per section id.
"""

from __future__ import annotations

import tomllib
from typing import List

from ergo_kb_core.exceptions import ProcessingError
from ergo_kb_core.loaders.base import BaseLoader
from ergo_kb_core.loaders.records import chunks_from_data
from ergo_kb_core.models import Chunk


class TOMLLoader(BaseLoader):
    extensions = (".toml",)
    format_name = "toml"

    def parse(self, text: str, source: str = "<memory>") -> List[Chunk]:
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise ProcessingError(
                message=f"Invalid TOML in {source}: {exc}",
                error_code="PROC_003",
                details={"source": source},
                original_exception=exc,
            ) from exc

        return chunks_from_data(data, source=source)
