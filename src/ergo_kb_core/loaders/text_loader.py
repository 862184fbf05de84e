"""
TextLoader - Reads the plain-text knowledge-base layout.

A line holding only ``[section_id]`` starts a chunk. The id must follow the
chunk id grammar (lowercase letters, digits, ``_``, ``-``, ``.``) and hold at
least one letter, so ``[R4]`` and footnote markers such as ``[1]`` stay in
the text. ``Title:`` and ``Tags:`` lines directly after it set the title and
comma-separated tags. Everything up to the next section line is the chunk
text; anything before the first one is ignored.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List

from ergo_kb_core.loaders.base import BaseLoader
from ergo_kb_core.loaders.records import chunk_from_record
from ergo_kb_core.models import Chunk

SECTION_LINE_PATTERN = re.compile(
    r"^[ \t]*\[(?P<id>(?=[a-z0-9_.\-]*[a-z])[a-z0-9][a-z0-9_.\-]*)\][ \t]*$"
)
FIELD_LINE_PATTERN = re.compile(r"^[ \t]*(?P<key>title|tags)[ \t]*:[ \t]*(?P<value>.*)$", re.I)


def split_text_sections(text: str, source: str = "<memory>") -> List[Chunk]:
    """Split ``[id]``-delimited text into chunks, in document order."""
    records: List[Dict[str, Any]] = []
    current: Dict[str, Any] = {}
    body: List[str] = []
    in_header = False

    def flush() -> None:
        if current:
            current["text"] = "\n".join(body).strip()
            records.append(dict(current))

    for line in text.replace("\r\n", "\n").split("\n"):
        section = SECTION_LINE_PATTERN.match(line)
        if section:
            flush()
            current = {"id": section.group("id")}
            body = []
            in_header = True
            continue

        if not current:
            continue

        field = FIELD_LINE_PATTERN.match(line) if in_header else None
        if field:
            key = field.group("key").lower()
            value = field.group("value").strip()
            if key == "tags":
                current["tags"] = [tag.strip() for tag in value.split(",") if tag.strip()]
            else:
                current["title"] = value
            continue

        in_header = False
        body.append(line)

    flush()

    return [
        chunk_from_record(record, source=source, position=position)
        for position, record in enumerate(records)
    ]


class TextLoader(BaseLoader):
    extensions = (".txt", ".text")
    format_name = "text"

    def parse(self, text: str, source: str = "<memory>") -> List[Chunk]:
        chunks = split_text_sections(text, source)
        if not chunks:
            self.logger.warning("no_sections_found", source=source)
        return chunks
