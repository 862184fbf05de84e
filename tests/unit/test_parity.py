"""
Unit tests for cross-format parity checking.
"""

from __future__ import annotations

import pytest

from ergo_kb_core.config import settings
from ergo_kb_core.exceptions import ParityError, ValidationError
from ergo_kb_core.index import ChunkIndex
from ergo_kb_core.knowledge_base import load_corpus
from ergo_kb_core.models import Chunk
from ergo_kb_core.parity import ParityChecker, ParityIssue, ParityReport, check_parity


def _index(*chunks: Chunk, source: str = "other") -> ChunkIndex:
    return ChunkIndex(chunks, source=source)


@pytest.fixture
def reference(abc_chunks) -> ChunkIndex:
    return ChunkIndex(abc_chunks, source="ref")


class TestBundledCorpus:
    def test_all_formats_agree_strictly(self):
        report = ParityChecker(strict=True).check_corpus(load_corpus())

        assert report.ok, "\n".join(str(issue) for issue in report.issues)
        assert report.reference == "knowledge_base.json"
        assert len(report.compared) == 7

    def test_reference_can_be_chosen(self):
        report = check_parity(load_corpus(), strict=False)

        assert report.ok
        assert ParityChecker().check_corpus(load_corpus(), "knowledge_base.md").ok


class TestCompare:
    def test_identical(self, reference, abc_chunks):
        assert ParityChecker(strict=True).compare(reference, _index(*abc_chunks)) == []

    def test_missing_and_extra(self, reference, abc_chunks):
        other = _index(abc_chunks[0], abc_chunks[1], Chunk(id="d", tags=["x"]))

        issues = ParityChecker().compare(reference, other)

        assert [(issue.kind, issue.chunk_id) for issue in issues] == [
            ("missing", "c"),
            ("extra", "d"),
        ]

    def test_order(self, reference, abc_chunks):
        other = _index(abc_chunks[1], abc_chunks[0], abc_chunks[2])

        (issue,) = ParityChecker().compare(reference, other)

        assert issue.kind == "order"
        assert issue.chunk_id is None

    def test_title_and_tags(self, reference, abc_chunks):
        other = _index(
            Chunk(id="a", title="Alpha", tags=["x"], text="alpha"),
            Chunk(id="b", title="B", tags=["y", "x"], text="beta"),
            Chunk(id="c", title="C", tags=["w"], text="gamma"),
        )

        issues = ParityChecker().compare(reference, other)

        assert [(issue.kind, issue.chunk_id) for issue in issues] == [
            ("title", "a"),
            ("tags", "c"),
        ]

    def test_text_only_checked_in_strict_mode(self, reference, abc_chunks):
        other = _index(
            abc_chunks[0], abc_chunks[1], Chunk(id="c", title="C", tags=["z"], text="delta")
        )

        assert ParityChecker(strict=False).compare(reference, other) == []
        (issue,) = ParityChecker(strict=True).compare(reference, other)
        assert issue.kind == "text"
        assert "'gamma' != 'delta'" in issue.detail

    def test_text_whitespace_is_normalized(self, reference, abc_chunks):
        other = _index(
            abc_chunks[0], abc_chunks[1], Chunk(id="c", title="C", tags=["z"], text=" gamma\n")
        )

        assert ParityChecker(strict=True).compare(reference, other) == []

    def test_strict_default_from_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "strict_parity", True)

        assert ParityChecker().strict is True
        assert ParityChecker(strict=False).strict is False


class TestCheckCorpus:
    def test_issues_labelled_with_corpus_name(self, reference, abc_chunks):
        corpus = {"ref.json": reference, "copy.yaml": _index(*abc_chunks[:2], source="/tmp/x.yaml")}

        report = ParityChecker().check_corpus(corpus)

        assert not report.ok
        assert report.compared == ["copy.yaml"]
        assert [issue.source for issue in report.issues] == ["copy.yaml"]
        assert report.issues_for("copy.yaml") == report.issues
        assert report.issues_for("ref.json") == []

    def test_empty_corpus(self):
        with pytest.raises(ValidationError) as exc_info:
            ParityChecker().check_corpus({})

        assert exc_info.value.error_code == "VAL_001"

    def test_unknown_reference(self, reference):
        with pytest.raises(ValidationError) as exc_info:
            ParityChecker().check_corpus({"ref.json": reference}, reference="other.json")

        assert exc_info.value.error_code == "VAL_004"

    def test_single_entry_is_ok(self, reference):
        report = ParityChecker().check_corpus({"ref.json": reference})

        assert report.ok
        assert report.compared == []


class TestParityReport:
    def test_raise_for_issues(self):
        issue = ParityIssue("kb.md", "missing", "known_issues", "section not present")
        report = ParityReport(reference="kb.json", compared=["kb.md"], issues=[issue])

        with pytest.raises(ParityError) as exc_info:
            report.raise_for_issues()

        error = exc_info.value
        assert error.error_code == "PAR_001"
        assert "[missing] kb.md:known_issues: section not present" in error.message
        assert error.details["issues"] == [
            {
                "source": "kb.md",
                "kind": "missing",
                "chunk_id": "known_issues",
                "detail": "section not present",
            }
        ]

    def test_ok_report_does_not_raise(self):
        ParityReport(reference="kb.json").raise_for_issues()

    def test_issue_str_without_chunk(self):
        assert str(ParityIssue("kb.md", "order", None, "x")) == "[order] kb.md: x"
