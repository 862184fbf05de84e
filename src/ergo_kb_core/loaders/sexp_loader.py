"""
SExpLoader - Reads knowledge-base S-expression files.

Layout::

    (knowledge-base
      (section known_issues
        (title "Known Issues")
        (tags known_issues security)
        (text "Unbounded register growth ...")))

The ``knowledge-base`` wrapper is optional; bare ``(section ...)`` forms at
top level are read the same way. ``;`` starts a comment.
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from ergo_kb_core.exceptions import ProcessingError, ValidationError
from ergo_kb_core.loaders.base import BaseLoader
from ergo_kb_core.loaders.records import chunk_from_section
from ergo_kb_core.models import Chunk

ROOT_HEADS = ("knowledge-base", "kb")
SECTION_HEAD = "section"
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", '"': '"', "\\": "\\"}
_DELIMITERS = set('()";')


class Symbol(str):
    """Bare atom, kept apart from quoted strings."""


def _atom(token: str) -> Any:
    try:
        return int(token)
    except ValueError:
        pass
    try:
        return float(token)
    except ValueError:
        return Symbol(token)


def read_sexp(text: str, source: str = "<memory>") -> List[Any]:
    """
    Read every top-level form in ``text``.

    Lists become Python lists, quoted strings ``str``, bare atoms
    :class:`Symbol`, and numeric atoms ``int``/``float``.

    Raises:
        ProcessingError: On unbalanced parentheses or an unterminated string
    """
    stack: List[List[Any]] = [[]]
    line = 1
    pos = 0
    length = len(text)

    def fail(message: str) -> ProcessingError:
        return ProcessingError(
            message=f"Invalid S-expression in {source}: {message} (line {line})",
            error_code="PROC_003",
            details={"source": source, "line": line},
        )

    while pos < length:
        char = text[pos]

        if char == "\n":
            line += 1
            pos += 1
        elif char.isspace():
            pos += 1
        elif char == ";":
            end = text.find("\n", pos)
            pos = length if end == -1 else end
        elif char == "(":
            stack.append([])
            pos += 1
        elif char == ")":
            if len(stack) == 1:
                raise fail("unexpected ')'")
            form = stack.pop()
            stack[-1].append(form)
            pos += 1
        elif char == '"':
            pos += 1
            buffer: List[str] = []
            while True:
                if pos >= length:
                    raise fail("unterminated string")
                char = text[pos]
                if char == '"':
                    pos += 1
                    break
                if char == "\\" and pos + 1 < length:
                    buffer.append(_ESCAPES.get(text[pos + 1], text[pos + 1]))
                    pos += 2
                    continue
                if char == "\n":
                    line += 1
                buffer.append(char)
                pos += 1
            stack[-1].append("".join(buffer))
        else:
            start = pos
            while pos < length and not text[pos].isspace() and text[pos] not in _DELIMITERS:
                pos += 1
            stack[-1].append(_atom(text[start:pos]))

    if len(stack) != 1:
        raise fail("missing ')'")

    return stack[0]


def _head(form: Any) -> str:
    if isinstance(form, list) and form and isinstance(form[0], Symbol):
        return str(form[0])
    return ""


class SExpLoader(BaseLoader):
    extensions = (".sexp", ".scm", ".el")
    format_name = "sexp"

    def parse(self, text: str, source: str = "<memory>") -> List[Chunk]:
        forms = read_sexp(text, source)

        if len(forms) == 1 and _head(forms[0]) in ROOT_HEADS:
            forms = forms[0][1:]

        chunks: List[Chunk] = []
        for position, form in enumerate(forms):
            section_id, content = self._section(form, source, position)
            chunks.append(chunk_from_section(section_id, content, source, position))
        return chunks

    def _section(self, form: Any, source: str, position: int) -> Tuple[str, Dict[str, Any]]:
        if _head(form) != SECTION_HEAD or len(form) < 2:
            raise ValidationError(
                message=f"Form {position} in {source} is not a (section id ...) form",
                error_code="VAL_002",
                details={"source": source, "position": position},
            )

        section_id = str(form[1])
        content: Dict[str, Any] = {}

        for clause in form[2:]:
            key = _head(clause)
            if not key:
                raise ValidationError(
                    message=f"Section '{section_id}' in {source} has a malformed clause",
                    error_code="VAL_002",
                    details={"source": source, "chunk_id": section_id},
                )
            values = [str(value) if isinstance(value, Symbol) else value for value in clause[1:]]

            if key == "tags":
                content[key] = values
            elif key == "text":
                content[key] = "\n".join(str(value) for value in values)
            elif len(values) == 1:
                content[key] = values[0]
            else:
                content[key] = values

        return section_id, content
