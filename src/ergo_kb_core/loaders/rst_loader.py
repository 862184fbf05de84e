"""
RSTLoader - Splits a reStructuredText knowledge base into chunks by section.

Section levels follow reStructuredText rules: the order in which adornment
styles first appear defines the hierarchy. Titles adorned with the
configured character (default ``-``) start chunks; a chunk runs until the
next title of the same or a higher level.

- ``.. _known_issues:`` directly above a title sets an explicit id.
- A ``Tags: a, b`` or ``:tags: a, b`` line directly under the title sets tags.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ergo_kb_core.config import settings
from ergo_kb_core.loaders.base import BaseLoader
from ergo_kb_core.loaders.records import chunk_from_record
from ergo_kb_core.models import Chunk
from ergo_kb_core.utils.text import slugify

ADORNMENT_PATTERN = re.compile(r"^([!-/:-@\[-`{-~])\1*[ \t]*$")
LABEL_PATTERN = re.compile(r"^\.\.[ \t]+_(?P<id>[^:]+):[ \t]*$")
TAGS_LINE_PATTERN = re.compile(r"^[ \t]*:?tags:[ \t]*(?P<tags>.*)$", re.IGNORECASE)


@dataclass
class _Title:
    text: str
    style: Tuple[str, bool]  # (adornment char, has overline)
    start: int  # first line of the title block, label included
    body_start: int  # first line after the underline
    label: Optional[str] = None


def _adornment(line: str) -> Optional[str]:
    match = ADORNMENT_PATTERN.match(line)
    if match and len(line.strip()) >= 2:
        return match.group(1)
    return None


def find_titles(lines: List[str]) -> List[_Title]:
    titles: List[_Title] = []
    index = 0
    count = len(lines)

    while index < count - 1:
        line = lines[index]
        char = _adornment(lines[index + 1])
        is_text = bool(line.strip()) and _adornment(line) is None

        if not (is_text and char and len(lines[index + 1].rstrip()) >= len(line.rstrip())):
            index += 1
            continue

        overline = index > 0 and _adornment(lines[index - 1]) == char
        start = index - 1 if overline else index
        title = _Title(
            text=line.strip(),
            style=(char, overline),
            start=start,
            body_start=index + 2,
        )

        probe = start - 1
        while probe >= 0 and not lines[probe].strip():
            probe -= 1
        if probe >= 0:
            label = LABEL_PATTERN.match(lines[probe].strip())
            if label:
                title.label = label.group("id").strip()
                title.start = probe

        titles.append(title)
        index += 2

    return titles


class RSTLoader(BaseLoader):
    extensions = (".rst", ".rest")
    format_name = "rst"

    def __init__(
        self, section_char: Optional[str] = None, max_file_size: Optional[int] = None
    ) -> None:
        super().__init__(max_file_size=max_file_size)
        self.section_char = section_char or settings.rst_section_char

    def parse(self, text: str, source: str = "<memory>") -> List[Chunk]:
        lines = text.replace("\r\n", "\n").split("\n")
        titles = find_titles(lines)

        styles: List[Tuple[str, bool]] = []
        for title in titles:
            if title.style not in styles:
                styles.append(title.style)

        def level(title: _Title) -> int:
            return styles.index(title.style)

        chunks: List[Chunk] = []
        for position, title in enumerate(titles):
            if title.style[0] != self.section_char:
                continue

            end = len(lines)
            for following in titles[position + 1 :]:
                if level(following) <= level(title):
                    end = following.start
                    break

            body = "\n".join(lines[title.body_start : end])
            tags: Optional[List[str]] = None
            first, _, rest = body.lstrip("\n").partition("\n")
            match = TAGS_LINE_PATTERN.match(first)
            if match:
                tags = [tag.strip() for tag in match.group("tags").split(",") if tag.strip()]
                body = rest

            chunks.append(
                chunk_from_record(
                    {
                        "id": title.label or slugify(title.text),
                        "title": title.text,
                        "tags": tags,
                        "text": body.strip(),
                    },
                    source=source,
                    position=len(chunks),
                )
            )

        if not chunks:
            self.logger.warning(
                "no_sections_found",
                source=source,
                section_char=self.section_char,
            )

        return chunks
