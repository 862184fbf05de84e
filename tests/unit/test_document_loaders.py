"""
Unit tests for the Markdown, reStructuredText and plain-text loaders.
"""

from __future__ import annotations

from pathlib import Path

from ergo_kb_core.config import settings
from ergo_kb_core.loaders import MarkdownLoader, RSTLoader, TextLoader
from ergo_kb_core.loaders.markdown_loader import pop_tags_line, split_heading, strip_markup
from ergo_kb_core.loaders.rst_loader import find_titles
from ergo_kb_core.loaders.text_loader import split_text_sections

MARKDOWN_DOC = """# Knowledge Base

Preamble that belongs to no chunk.

## Alpha Section

Tags: x

alpha text

### Detail

still alpha

## Beta {#b}

Tags: x, y

```
## not a heading
```
"""

RST_DOC = """==============
Knowledge Base
==============

Preamble.

Alpha Section
-------------

:tags: x

alpha text

Detail
~~~~~~

still alpha

.. _b:

Beta
----

Tags: x, y

beta text
"""


class TestMarkdownHelpers:
    def test_split_heading_with_explicit_id(self):
        assert split_heading("Known Issues {#known_issues}") == ("Known Issues", "known_issues")

    def test_split_heading_without_id(self):
        assert split_heading(" Known Issues ") == ("Known Issues", None)

    def test_pop_tags_line(self):
        tags, rest = pop_tags_line("\nTags: a, b ,\nbody")

        assert tags == ["a", "b"]
        assert rest == "body"

    def test_pop_tags_line_absent(self):
        assert pop_tags_line("\nbody") == (None, "\nbody")

    def test_strip_markup(self):
        text = "**bold** and *em* with `code` and [docs](https://ergoplatform.org)"

        assert strip_markup(text) == "bold and em with code and docs (https://ergoplatform.org)"


class TestMarkdownLoader:
    def test_sections_at_level_two(self):
        chunks = MarkdownLoader().parse(MARKDOWN_DOC)

        assert [chunk.id for chunk in chunks] == ["alpha_section", "b"]
        assert chunks[0].title == "Alpha Section"
        assert chunks[0].tags == ("x",)
        assert chunks[0].text == "alpha text\n\n### Detail\n\nstill alpha"
        assert chunks[1].tags == ("x", "y")

    def test_fenced_heading_stays_in_text(self):
        chunks = MarkdownLoader().parse(MARKDOWN_DOC)

        assert "## not a heading" in chunks[1].text

    def test_custom_section_level(self):
        chunks = MarkdownLoader(section_level=3).parse(MARKDOWN_DOC)

        assert [(chunk.id, chunk.text) for chunk in chunks] == [("detail", "still alpha")]

    def test_section_level_from_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "markdown_section_level", 1)

        (chunk,) = MarkdownLoader().parse(MARKDOWN_DOC)

        assert chunk.id == "knowledge_base"

    def test_clean_markup(self):
        (chunk,) = MarkdownLoader(clean_markup=True).parse("## A\n\n**strong** point\n")

        assert chunk.text == "strong point"

    def test_no_sections(self):
        assert MarkdownLoader().parse("just text\n") == []

    def test_load_markdown_extension(self, tmp_path: Path):
        path = tmp_path / "kb.markdown"
        path.write_text("## A\n\nalpha\n", encoding="utf-8")

        (chunk,) = MarkdownLoader().load(path)

        assert (chunk.id, chunk.tags, chunk.text) == ("a", ("a",), "alpha")


class TestRSTLoader:
    def test_find_titles_styles(self):
        titles = find_titles(RST_DOC.split("\n"))

        assert [title.text for title in titles] == [
            "Knowledge Base",
            "Alpha Section",
            "Detail",
            "Beta",
        ]
        assert titles[0].style == ("=", True)
        assert titles[1].style == ("-", False)
        assert titles[3].label == "b"

    def test_sections(self):
        chunks = RSTLoader().parse(RST_DOC)

        assert [chunk.id for chunk in chunks] == ["alpha_section", "b"]
        assert chunks[0].tags == ("x",)
        assert chunks[0].text == "alpha text\n\nDetail\n~~~~~~\n\nstill alpha"
        assert chunks[1].title == "Beta"
        assert chunks[1].tags == ("x", "y")
        assert chunks[1].text == "beta text"

    def test_label_not_left_in_previous_chunk(self):
        chunks = RSTLoader().parse(RST_DOC)

        assert ".. _b:" not in chunks[0].text

    def test_custom_section_char(self):
        chunks = RSTLoader(section_char="~").parse(RST_DOC)

        assert [(chunk.id, chunk.text) for chunk in chunks] == [("detail", "still alpha")]

    def test_short_underline_is_not_a_title(self):
        assert RSTLoader().parse("Long Title\n---\n\ntext\n") == []


class TestTextLoader:
    def test_split_sections(self):
        chunks = split_text_sections(
            "Heading ignored\n"
            "[a]\nTitle: Alpha\nTags: x\n\nalpha\n"
            "[b]\nTags: x, y\nbeta\nTitle: not a header\n"
        )

        assert [chunk.id for chunk in chunks] == ["a", "b"]
        assert chunks[0].title == "Alpha"
        assert chunks[0].text == "alpha"
        assert chunks[1].title == "B"
        assert chunks[1].text == "beta\nTitle: not a header"

    def test_section_without_body(self):
        (chunk,) = split_text_sections("[a]\n")

        assert chunk.text == ""

    def test_inline_brackets_do_not_start_sections(self):
        assert split_text_sections("see [a] here\n") == []

    def test_load(self, tmp_path: Path):
        path = tmp_path / "kb.txt"
        path.write_text("[a]\r\nTags: x\r\nalpha\r\n", encoding="utf-8")

        (chunk,) = TextLoader().load(path)

        assert (chunk.id, chunk.tags, chunk.text) == ("a", ("x",), "alpha")


class TestTextSectionMarkers:
    """Only bracketed chunk ids with a letter start a section."""

    def test_numeric_footnote_stays_in_body(self):
        chunks = TextLoader().parse("[a]\nsee\n[1]\nfootnote\n")

        assert [chunk.id for chunk in chunks] == ["a"]
        assert chunks[0].text == "see\n[1]\nfootnote"

    def test_register_name_stays_in_body(self):
        chunks = split_text_sections(
            "[known_issues]\nRead\n[R4]\nwith isDefined first.\n[b]\nbeta\n"
        )

        assert [chunk.id for chunk in chunks] == ["known_issues", "b"]
        assert chunks[0].text == "Read\n[R4]\nwith isDefined first."

    def test_ids_with_digits_and_dots_still_start_sections(self):
        chunks = split_text_sections("[v1.2]\none\n[2fa]\ntwo\n")

        assert [chunk.id for chunk in chunks] == ["v1.2", "2fa"]

    def test_bracketed_text_before_first_section_ignored(self):
        assert split_text_sections("[1]\n[R4]\nno sections\n") == []
