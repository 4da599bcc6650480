"""Tests for summary aggregation."""

from __future__ import annotations

import pytest

from statescope.core.analyzer import SecurityFinding
from statescope.core.dependency import DependencyEdge, EdgeKind
from statescope.core.report import provider_name, summarize
from statescope.core.rules import Category, Severity
from statescope.core.state import parse_state


def _finding(severity: Severity, title: str) -> SecurityFinding:
    return SecurityFinding(
        id=title, severity=severity, category=Category.COMPLIANCE, title=title,
        description="", resource="r.r[0]", remediation="",
    )


class TestProviderName:
    """Tests for provider reference parsing."""

    @pytest.mark.parametrize(
        ("reference", "expected"),
        [
            ('provider["aws"]', "aws"),
            ('provider["registry.terraform.io/hashicorp/aws"]', "registry"),
            ('provider["aws"].west', "aws"),
            ("provider.aws", "provider"),
            ("aws", "aws"),
        ],
    )
    def test_provider_name(self, reference: str, expected: str) -> None:
        assert provider_name(reference) == expected


class TestSummarize:
    """Tests for ``summarize``."""

    def test_counts_and_locations(self, mixed_state) -> None:
        doc = parse_state(mixed_state)
        summary = summarize(doc, [], [])
        assert summary.total_resources == 4
        assert summary.resources_by_type == {
            "aws_vpc": 1, "aws_subnet": 1, "aws_security_group": 1, "aws_instance": 1,
        }
        assert summary.regions == ("us-east-1", "eu-west-1")
        assert summary.providers == ("registry",)
        assert summary.security_score == 100

    def test_severity_and_critical_counts(self, make_state) -> None:
        findings = [
            _finding(Severity.CRITICAL, "a"),
            _finding(Severity.CRITICAL, "b"),
            _finding(Severity.LOW, "c"),
            _finding(Severity.UNKNOWN, "d"),
        ]
        summary = summarize(parse_state(make_state()), findings, [])
        assert summary.critical_issues == 2
        assert summary.severity_counts == {"critical": 2, "high": 0, "medium": 0, "low": 1}
        assert summary.security_score == 100 - 25 - 25 - 3

    def test_dependency_counts(self, make_state) -> None:
        edges = [
            DependencyEdge("a.a", "b.b", EdgeKind.EXPLICIT, "depends_on"),
            DependencyEdge("a.a", "b.b", EdgeKind.IMPLICIT, "x"),
            DependencyEdge("c.c", "b.b", EdgeKind.IMPLICIT, "y"),
        ]
        summary = summarize(parse_state(make_state()), [], edges)
        assert summary.dependency_counts == {"explicit": 1, "implicit": 2, "total": 3}

    def test_malformed_region_values_are_ignored(self, make_state, make_resource) -> None:
        doc = parse_state(make_state(
            make_resource("t", "a", {"region": 5, "availability_zone": ["us-east-1a"]}),
            make_resource("t", "b", {"region": "", "availability_zone": "x"}),
            make_resource("t", "c", {"availability_zone": "ap-south-1a", "region": "ap-south-1"}),
        ))
        assert summarize(doc, [], []).regions == ("ap-south-1",)

    def test_empty_provider_is_skipped(self, make_state, make_resource) -> None:
        doc = parse_state(make_state(make_resource("t", "a", {}, provider="")))
        assert summarize(doc, [], []).providers == ()

    def test_to_dict(self, mixed_state) -> None:
        data = summarize(parse_state(mixed_state), [], []).to_dict()
        assert data["regions"] == ["us-east-1", "eu-west-1"]
        assert set(data) == {
            "total_resources", "resources_by_type", "security_score", "critical_issues",
            "severity_counts", "dependency_counts", "regions", "providers",
        }
