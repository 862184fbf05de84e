"""
ParityChecker - Verifies that serializations of the knowledge base agree.

Every emitted format must carry the same section ids, titles and tags. In
strict mode the whitespace-normalized text must match as well; document
formats (Markdown, reStructuredText, PDF) reflow text, so the default
comparison leaves text out.

License: MIT
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Dict, List, Mapping, Optional

from ergo_kb_core.config import settings
from ergo_kb_core.exceptions import ParityError, ValidationError
from ergo_kb_core.index import ChunkIndex
from ergo_kb_core.utils import get_logger


@dataclass(frozen=True)
class ParityIssue:
    """One disagreement between the reference index and another source."""

    source: str
    kind: str  # missing | extra | order | title | tags | text
    chunk_id: Optional[str]
    detail: str

    def __str__(self) -> str:
        where = f"{self.source}:{self.chunk_id}" if self.chunk_id else self.source
        return f"[{self.kind}] {where}: {self.detail}"


@dataclass
class ParityReport:
    reference: str
    compared: List[str] = field(default_factory=list)
    issues: List[ParityIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.issues

    def issues_for(self, source: str) -> List[ParityIssue]:
        return [issue for issue in self.issues if issue.source == source]

    def raise_for_issues(self) -> None:
        """
        Raises:
            ParityError: Listing every issue, when the report is not ok
        """
        if self.ok:
            return
        lines = "\n".join(f"  {issue}" for issue in self.issues)
        raise ParityError(
            message=f"{len(self.issues)} parity issue(s) against {self.reference}:\n{lines}",
            details={
                "reference": self.reference,
                "issues": [asdict(issue) for issue in self.issues],
            },
        )


class ParityChecker:
    """
    Compares chunk indexes built from different serializations.

    Example:
        ```python
        checker = ParityChecker(strict=True)
        report = checker.check_corpus(load_corpus("kb/"))
        report.raise_for_issues()
        ```
    """

    def __init__(self, strict: Optional[bool] = None) -> None:
        self.logger = get_logger(__name__)
        self.strict = settings.strict_parity if strict is None else strict

    def compare(self, reference: ChunkIndex, other: ChunkIndex) -> List[ParityIssue]:
        """Return the issues found in ``other`` relative to ``reference``."""
        source = other.source
        issues: List[ParityIssue] = []

        expected_ids = reference.ids()
        actual_ids = other.ids()

        for chunk_id in expected_ids:
            if chunk_id not in other:
                issues.append(ParityIssue(source, "missing", chunk_id, "section not present"))
        for chunk_id in actual_ids:
            if chunk_id not in reference:
                issues.append(
                    ParityIssue(source, "extra", chunk_id, f"not present in {reference.source}")
                )

        shared_expected = [chunk_id for chunk_id in expected_ids if chunk_id in other]
        shared_actual = [chunk_id for chunk_id in actual_ids if chunk_id in reference]
        if shared_expected != shared_actual:
            issues.append(
                ParityIssue(
                    source,
                    "order",
                    None,
                    f"expected {shared_expected}, got {shared_actual}",
                )
            )

        for chunk_id in shared_expected:
            want = reference.get(chunk_id)
            got = other.get(chunk_id)

            if want.title != got.title:
                issues.append(
                    ParityIssue(source, "title", chunk_id, f"{want.title!r} != {got.title!r}")
                )
            if want.tag_set != got.tag_set:
                issues.append(
                    ParityIssue(
                        source,
                        "tags",
                        chunk_id,
                        f"{sorted(want.tag_set)} != {sorted(got.tag_set)}",
                    )
                )
            if self.strict and want.normalized_text() != got.normalized_text():
                issues.append(
                    ParityIssue(source, "text", chunk_id, _first_difference(want, got))
                )

        return issues

    def check_corpus(
        self, corpus: Mapping[str, ChunkIndex], reference: Optional[str] = None
    ) -> ParityReport:
        """
        Compare every index in ``corpus`` against the reference entry.

        The reference defaults to the first entry.

        Raises:
            ValidationError: If the corpus is empty or the reference name is unknown
        """
        if not corpus:
            raise ValidationError(
                message="Cannot check parity of an empty corpus",
                error_code="VAL_001",
            )

        names = list(corpus)
        reference_name = reference or names[0]
        if reference_name not in corpus:
            raise ValidationError(
                message=f"Reference '{reference_name}' is not part of the corpus",
                error_code="VAL_004",
                details={"reference": reference_name, "available": names},
            )

        reference_index = corpus[reference_name]
        report = ParityReport(reference=reference_name)

        for name in names:
            if name == reference_name:
                continue
            issues = self.compare(reference_index, _relabel(corpus[name], name))
            report.compared.append(name)
            report.issues.extend(issues)

        self.logger.info(
            "parity_checked",
            reference=reference_name,
            compared=len(report.compared),
            issue_count=len(report.issues),
            strict=self.strict,
        )
        return report


def _relabel(index: ChunkIndex, name: str) -> ChunkIndex:
    if index.source == name:
        return index
    return ChunkIndex(index, source=name)


def _first_difference(want, got, context: int = 30) -> str:
    left = want.normalized_text()
    right = got.normalized_text()
    position = next(
        (i for i, (a, b) in enumerate(zip(left, right)) if a != b),
        min(len(left), len(right)),
    )
    start = max(0, position - context)
    return (
        f"text differs at character {position}: "
        f"{left[start:position + context]!r} != {right[start:position + context]!r}"
    )


def check_parity(corpus: Dict[str, ChunkIndex], strict: Optional[bool] = None) -> ParityReport:
    """Convenience wrapper: ``ParityChecker(strict).check_corpus(corpus)``."""
    return ParityChecker(strict=strict).check_corpus(corpus)
