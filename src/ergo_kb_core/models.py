"""
Data models for ergo_kb_core.

Defines the immutable Chunk record served by the ChunkIndex.
"""

from __future__ import annotations

import re
from typing import Any, Dict, FrozenSet, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ergo_kb_core.utils.text import humanize_id, normalize_whitespace

CHUNK_ID_PATTERN = re.compile(r"^[a-z0-9][a-z0-9_.\-]*$")


class Chunk(BaseModel):
    """Named, tagged unit of reference text for retrieval-augmented prompting."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(..., min_length=1, max_length=200)
    title: str = ""
    tags: Tuple[str, ...] = ()
    text: str = ""

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        if not CHUNK_ID_PATTERN.match(v):
            raise ValueError(
                f"chunk id must be lowercase letters, digits, '_', '-' or '.', got '{v}'"
            )
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def validate_tags(cls, v: Any) -> Tuple[str, ...]:
        """Accept any iterable of strings; drop duplicates, keep first-seen order."""
        if v is None:
            return ()
        if isinstance(v, str):
            v = [v]
        seen: Dict[str, None] = {}
        for tag in v:
            if not isinstance(tag, str):
                raise ValueError(f"tags must be strings, got {type(tag).__name__}")
            tag = tag.strip()
            if not tag:
                raise ValueError("tags cannot be empty")
            seen.setdefault(tag, None)
        return tuple(seen)

    @model_validator(mode="after")
    def fill_defaults(self) -> "Chunk":
        # Frozen model: defaults are written through object.__setattr__.
        if not self.title.strip():
            object.__setattr__(self, "title", humanize_id(self.id))
        if not self.tags:
            object.__setattr__(self, "tags", (self.id,))
        return self

    @property
    def tag_set(self) -> FrozenSet[str]:
        return frozenset(self.tags)

    def normalized_text(self) -> str:
        """Chunk text with runs of whitespace collapsed, used for parity checks."""
        return normalize_whitespace(self.text)

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "tags": list(self.tags),
            "text": self.text,
        }

    def summary(self, length: int = 120) -> str:
        """Return a short representation of the chunk for listings."""
        snippet = self.normalized_text()
        return snippet[:length] + ("..." if len(snippet) > length else "")
