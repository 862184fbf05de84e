"""
Record normalization shared by the structured loaders.

JSON, YAML, TOML and S-expression sources all decode to plain Python data.
This module turns that data into Chunk records. Three shapes are accepted:

1. A list of records ``[{id, title?, tags?, text}]``.
2. A mapping whose only key is ``chunks``, holding such a list.
3. A section mapping ``{section_id: content}``; a lone ``sections`` key may wrap it.

License: MIT
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Dict, List, Mapping

from pydantic import ValidationError as PydanticValidationError

from ergo_kb_core.exceptions import ValidationError
from ergo_kb_core.models import Chunk

RECORD_KEYS = ("id", "title", "tags", "text")
TEXT_ALIASES = ("text", "content")


def _render_scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


def _is_scalar(value: Any) -> bool:
    return not isinstance(value, (list, tuple, dict))


def render_content(value: Any, indent: int = 0) -> str:
    """
    Render decoded content as plain text.

    Strings pass through. Lists become ``- item`` lines, mappings become
    ``key: value`` lines; nested containers are indented by two spaces.
    """
    pad = "  " * indent

    if isinstance(value, str):
        if indent == 0:
            return value
        return "\n".join(pad + line for line in value.splitlines())

    if isinstance(value, (list, tuple)):
        lines: List[str] = []
        for item in value:
            if _is_scalar(item):
                lines.append(f"{pad}- {_render_scalar(item)}")
            else:
                lines.append(f"{pad}-")
                lines.append(render_content(item, indent + 1))
        return "\n".join(lines)

    if isinstance(value, dict):
        lines = []
        for key, item in value.items():
            if _is_scalar(item):
                lines.append(f"{pad}{key}: {_render_scalar(item)}")
            else:
                lines.append(f"{pad}{key}:")
                lines.append(render_content(item, indent + 1))
        return "\n".join(lines)

    return pad + _render_scalar(value)


def _build_chunk(fields: Dict[str, Any], source: str, position: int) -> Chunk:
    try:
        return Chunk(**fields)
    except PydanticValidationError as exc:
        chunk_id = fields.get("id")
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ())) or "record"
        raise ValidationError(
            message=f"Invalid chunk record {chunk_id or position} in {source}: "
            f"{location}: {first.get('msg')}",
            error_code="VAL_002",
            details={"chunk_id": chunk_id, "position": position, "source": source},
            original_exception=exc,
        ) from exc


def _text_of(record: Mapping[str, Any]) -> Any:
    for key in TEXT_ALIASES:
        if key in record:
            return record[key]
    return ""


def chunk_from_record(record: Any, source: str = "<memory>", position: int = 0) -> Chunk:
    """
    Build one Chunk from an ``{id, title, tags, text}`` mapping.

    Raises:
        ValidationError: If the record is not a mapping, lacks an id, or is invalid
    """
    if not isinstance(record, Mapping):
        raise ValidationError(
            message=f"Chunk record {position} in {source} must be a mapping",
            error_code="VAL_002",
            details={"position": position, "source": source},
        )

    chunk_id = record.get("id")
    if chunk_id is None or (isinstance(chunk_id, str) and not chunk_id.strip()):
        raise ValidationError(
            message=f"Chunk record {position} in {source} has no id",
            error_code="VAL_001",
            details={"position": position, "source": source},
        )

    return _build_chunk(
        {
            "id": str(chunk_id).strip(),
            "title": _render_scalar(record.get("title")).strip(),
            "tags": record.get("tags"),
            "text": render_content(_text_of(record)).strip(),
        },
        source,
        position,
    )


def chunk_from_section(
    section_id: str, content: Any, source: str = "<memory>", position: int = 0
) -> Chunk:
    """
    Build one Chunk from a ``section_id: content`` entry.

    Mapping content may carry ``title``, ``tags`` and ``text``; any other keys
    are rendered and appended to the text.
    """
    title: Any = None
    tags: Any = None
    body: List[str] = []

    if isinstance(content, Mapping):
        rest: Dict[str, Any] = {}
        for key, value in content.items():
            if key == "title":
                title = value
            elif key == "tags":
                tags = value
            elif key in TEXT_ALIASES:
                body.insert(0, render_content(value).strip())
            else:
                rest[key] = value
        if rest:
            body.append(render_content(rest).strip())
    else:
        body.append(render_content(content).strip())

    return _build_chunk(
        {
            "id": str(section_id).strip(),
            "title": _render_scalar(title).strip(),
            "tags": tags,
            "text": "\n\n".join(part for part in body if part),
        },
        source,
        position,
    )


def chunks_from_records(records: List[Any], source: str = "<memory>") -> List[Chunk]:
    return [chunk_from_record(record, source, position) for position, record in enumerate(records)]


def _is_records_wrapper(data: Mapping[str, Any]) -> bool:
    return list(data) == ["chunks"] and isinstance(data["chunks"], list)


def _is_sections_wrapper(data: Mapping[str, Any]) -> bool:
    """
    True for ``{"sections": {id: content}}``.

    A section whose id is ``sections`` exports as ``{"sections": {title, tags, text}}``;
    its ``tags`` list keeps it from being mistaken for the wrapper.
    """
    if list(data) != ["sections"] or not isinstance(data["sections"], Mapping):
        return False
    return all(isinstance(value, (Mapping, str)) for value in data["sections"].values())


def chunks_from_data(data: Any, source: str = "<memory>") -> List[Chunk]:
    """
    Convert decoded structured data to chunks in document order.

    Raises:
        ValidationError: If the data matches none of the accepted shapes
    """
    if isinstance(data, list):
        return chunks_from_records(data, source)

    if isinstance(data, Mapping):
        if _is_records_wrapper(data):
            return chunks_from_records(data["chunks"], source)

        if _is_sections_wrapper(data):
            data = data["sections"]

        return [
            chunk_from_section(section_id, content, source, position)
            for position, (section_id, content) in enumerate(data.items())
        ]

    raise ValidationError(
        message=f"Unsupported knowledge-base layout in {source}: "
        f"expected a list or mapping, got {type(data).__name__}",
        error_code="VAL_002",
        details={"source": source},
    )
