"""
YAMLLoader - Reads knowledge-base YAML files with PyYAML's safe loader.
"""

from __future__ import annotations

from typing import List

import yaml

from ergo_kb_core.exceptions import ProcessingError, ValidationError
from ergo_kb_core.loaders.base import BaseLoader
from ergo_kb_core.loaders.records import chunks_from_data
from ergo_kb_core.models import Chunk


class YAMLLoader(BaseLoader):
    extensions = (".yaml", ".yml")
    format_name = "yaml"

    def parse(self, text: str, source: str = "<memory>") -> List[Chunk]:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            mark = getattr(exc, "problem_mark", None)
            raise ProcessingError(
                message=f"Invalid YAML in {source}: {exc}",
                error_code="PROC_003",
                details={"source": source, "line": mark.line + 1 if mark else None},
                original_exception=exc,
            ) from exc

        if data is None:
            raise ValidationError(
                message=f"YAML document {source} is empty",
                error_code="VAL_001",
                details={"source": source},
            )

        return chunks_from_data(data, source=source)
