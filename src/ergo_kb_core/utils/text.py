"""Small text helpers shared by the loaders and the parity checker."""

import re

_SLUG_STRIP = re.compile(r"[^a-z0-9]+")
_WHITESPACE = re.compile(r"\s+")


def slugify(text: str) -> str:
    """Turn a heading such as ``Known Issues`` into ``known_issues``."""
    return _SLUG_STRIP.sub("_", text.lower()).strip("_")


def humanize_id(chunk_id: str) -> str:
    """Default title for a chunk id: ``secure_patterns_index`` -> ``Secure Patterns Index``."""
    words = re.split(r"[_\-.]+", chunk_id)
    return " ".join(word.capitalize() for word in words if word)


def normalize_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()
