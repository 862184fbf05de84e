"""
MarkdownLoader - Splits a Markdown knowledge base into chunks by heading.

Every heading of the configured level starts a chunk that runs until the
next heading of the same or a higher level. Conventions:

- ``## Known Issues {#known_issues}`` sets an explicit id; without it the
  id is the slug of the heading text.
- A ``Tags: a, b`` line directly under the heading sets the tags.
- Headings inside fenced code blocks are ignored.
- Text above the first chunk heading (document title, preamble) is dropped.
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from ergo_kb_core.config import settings
from ergo_kb_core.loaders.base import BaseLoader
from ergo_kb_core.loaders.records import chunk_from_record
from ergo_kb_core.models import Chunk
from ergo_kb_core.utils.text import slugify

CODE_BLOCK_PATTERN = re.compile(
    r"^[ \t]*(?P<fence>`{3,}|~{3,})[^\n]*\n.*?^[ \t]*(?P=fence)[ \t]*$",
    re.DOTALL | re.MULTILINE,
)
HEADER_PATTERN = re.compile(
    r"^[ \t]{0,3}(?P<hashes>#{1,6})[ \t]+(?P<header>.+?)(?:[ \t]+#+)?[ \t]*$",
    re.MULTILINE,
)
EXPLICIT_ID_PATTERN = re.compile(r"\s*\{#(?P<id>[^}\s]+)\}\s*$")
TAGS_LINE_PATTERN = re.compile(r"^[ \t]*tags[ \t]*:[ \t]*(?P<tags>.*)$", re.IGNORECASE)

IMAGE_LINK_PATTERN = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)")
MARKDOWN_LINK_PATTERN = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")


def split_heading(header: str) -> Tuple[str, Optional[str]]:
    """Return ``(title, explicit_id)`` for a heading line's text."""
    match = EXPLICIT_ID_PATTERN.search(header)
    if match:
        return header[: match.start()].strip(), match.group("id")
    return header.strip(), None


def pop_tags_line(body: str) -> Tuple[Optional[List[str]], str]:
    """
    Remove a leading ``Tags:`` line from a section body.

    Returns the parsed tags (None when there is no such line) and the rest.
    """
    stripped = body.lstrip("\n")
    first, _, rest = stripped.partition("\n")
    match = TAGS_LINE_PATTERN.match(first)
    if not match:
        return None, body
    tags = [tag.strip() for tag in match.group("tags").split(",") if tag.strip()]
    return tags, rest


def strip_markup(text: str) -> str:
    """Drop inline Markdown decoration, keeping link labels and URLs readable."""
    text = IMAGE_LINK_PATTERN.sub(lambda m: f"{m.group(1).strip()} ({m.group(2).strip()})", text)
    text = MARKDOWN_LINK_PATTERN.sub(lambda m: f"{m.group(1).strip()} ({m.group(2).strip()})", text)
    text = re.sub(r"(?s)(\*\*|__)(.+?)\1", r"\2", text)
    text = re.sub(r"(?<![\w*])\*(?!\s)(.+?)(?<!\s)\*(?![\w*])", r"\1", text)
    text = re.sub(r"(?s)~~(.+?)~~", r"\1", text)
    text = re.sub(r"`([^`\n]+)`", r"\1", text)
    return text


class MarkdownLoader(BaseLoader):
    extensions = (".md", ".markdown")
    format_name = "markdown"

    def __init__(
        self,
        section_level: Optional[int] = None,
        clean_markup: bool = False,
        max_file_size: Optional[int] = None,
    ) -> None:
        super().__init__(max_file_size=max_file_size)
        self.section_level = section_level or settings.markdown_section_level
        self.clean_markup = clean_markup

    def _headings(self, text: str) -> List[re.Match[str]]:
        fenced = [match.span() for match in CODE_BLOCK_PATTERN.finditer(text)]
        return [
            match
            for match in HEADER_PATTERN.finditer(text)
            if not any(start <= match.start() < end for start, end in fenced)
        ]

    def parse(self, text: str, source: str = "<memory>") -> List[Chunk]:
        text = text.replace("\r\n", "\n")
        headings = self._headings(text)
        chunks: List[Chunk] = []

        for position, match in enumerate(headings):
            level = len(match.group("hashes"))
            if level != self.section_level:
                continue

            end = len(text)
            for following in headings[position + 1 :]:
                if len(following.group("hashes")) <= self.section_level:
                    end = following.start()
                    break

            title, explicit_id = split_heading(match.group("header"))
            tags, body = pop_tags_line(text[match.end() : end])
            if self.clean_markup:
                body = strip_markup(body)

            chunks.append(
                chunk_from_record(
                    {
                        "id": explicit_id or slugify(title),
                        "title": title,
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
                section_level=self.section_level,
            )

        return chunks
