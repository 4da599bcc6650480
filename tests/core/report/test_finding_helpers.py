"""Tests for ranking and filtering findings."""

from __future__ import annotations

from statescope.core.analyzer import SecurityFinding
from statescope.core.report import filter_findings, rank_findings, severity_counts
from statescope.core.rules import Category, Severity


def _finding(fid: str, severity: Severity, category: Category = Category.COMPLIANCE,
             title: str = "Title", resource: str = "aws_x.y[0]", description: str = "") -> SecurityFinding:
    return SecurityFinding(
        id=fid, severity=severity, category=category, title=title,
        description=description, resource=resource, remediation="",
    )


FINDINGS = [
    _finding("low", Severity.LOW, title="Logging disabled"),
    _finding("crit", Severity.CRITICAL, Category.PUBLIC_EXPOSURE, title="Open SSH"),
    _finding("med", Severity.MEDIUM, Category.ENCRYPTION, resource="aws_ebs_volume.data[0]"),
    _finding("crit2", Severity.CRITICAL, description="Database reachable from INTERNET"),
    _finding("unk", Severity.UNKNOWN),
]


class TestRankFindings:
    """Tests for severity ranking."""

    def test_most_severe_first_stable(self) -> None:
        assert [f.id for f in rank_findings(FINDINGS)] == ["crit", "crit2", "med", "low", "unk"]

    def test_input_is_not_mutated(self) -> None:
        before = list(FINDINGS)
        rank_findings(FINDINGS)
        assert FINDINGS == before


class TestFilterFindings:
    """Tests for finding filters."""

    def test_no_criteria_keeps_everything(self) -> None:
        assert filter_findings(FINDINGS) == FINDINGS

    def test_exact_severity(self) -> None:
        assert [f.id for f in filter_findings(FINDINGS, severity=Severity.CRITICAL)] == ["crit", "crit2"]

    def test_category(self) -> None:
        assert [f.id for f in filter_findings(FINDINGS, category=Category.ENCRYPTION)] == ["med"]

    def test_min_severity(self) -> None:
        ids = [f.id for f in filter_findings(FINDINGS, min_severity=Severity.MEDIUM)]
        assert ids == ["crit", "med", "crit2"]

    def test_query_searches_title_resource_description(self) -> None:
        assert [f.id for f in filter_findings(FINDINGS, query="open ssh")] == ["crit"]
        assert [f.id for f in filter_findings(FINDINGS, query="EBS_VOLUME")] == ["med"]
        assert [f.id for f in filter_findings(FINDINGS, query="internet")] == ["crit2"]

    def test_criteria_combine(self) -> None:
        assert filter_findings(FINDINGS, severity=Severity.LOW, query="ssh") == []


class TestSeverityCounts:
    """Tests for per-severity counts."""

    def test_counts_skip_unknown(self) -> None:
        assert severity_counts(FINDINGS) == {"critical": 2, "high": 0, "medium": 1, "low": 1}

    def test_empty(self) -> None:
        assert severity_counts([]) == {"critical": 0, "high": 0, "medium": 0, "low": 0}
