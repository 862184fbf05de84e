"""
Exporters - Serialize a ChunkIndex back into knowledge-base layouts.

Every output re-loads through the matching loader into an equal index.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List

import yaml

from ergo_kb_core.exceptions import ValidationError
from ergo_kb_core.index import ChunkIndex

LAYOUTS = ("sections", "records", "rag")


def to_records(index: ChunkIndex) -> List[Dict[str, Any]]:
    return index.to_records()


def to_sections(index: ChunkIndex) -> Dict[str, Dict[str, Any]]:
    """Section mapping layout: ``{id: {title, tags, text}}``."""
    return {
        chunk.id: {"title": chunk.title, "tags": list(chunk.tags), "text": chunk.text}
        for chunk in index
    }


def to_rag_chunks(index: ChunkIndex) -> Dict[str, List[Dict[str, Any]]]:
    """The ``rag_chunks.json`` layout: ``{"chunks": [{id, title, tags, text}]}``."""
    return {"chunks": to_records(index)}


def _layout(index: ChunkIndex, layout: str) -> Any:
    if layout == "sections":
        return to_sections(index)
    if layout == "records":
        return to_records(index)
    if layout == "rag":
        return to_rag_chunks(index)
    raise ValidationError(
        message=f"Unknown export layout '{layout}'",
        error_code="VAL_004",
        details={"layout": layout, "available": list(LAYOUTS)},
    )


def to_json(index: ChunkIndex, layout: str = "sections", indent: int = 2) -> str:
    return json.dumps(_layout(index, layout), indent=indent, ensure_ascii=False) + "\n"


def to_yaml(index: ChunkIndex, layout: str = "sections") -> str:
    return yaml.safe_dump(
        _layout(index, layout),
        sort_keys=False,
        allow_unicode=True,
        width=88,
    )
