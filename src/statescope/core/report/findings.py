"""Ranking and filtering helpers over evaluator findings.

Pure functions over finding lists. They never mutate their input and are
what the CLI uses to order the findings table and apply
``--severity-threshold``.
"""

from __future__ import annotations

from typing import Iterable

from statescope.core.analyzer.models import SecurityFinding
from statescope.core.rules.models import Category, Severity

COUNTED_SEVERITIES: tuple[Severity, ...] = (
    Severity.CRITICAL,
    Severity.HIGH,
    Severity.MEDIUM,
    Severity.LOW,
)


def rank_findings(findings: Iterable[SecurityFinding]) -> list[SecurityFinding]:
    """Sort by severity, most severe first. Ties keep discovery order."""
    return sorted(findings, key=lambda finding: finding.severity, reverse=True)


def filter_findings(
    findings: Iterable[SecurityFinding],
    *,
    severity: Severity | None = None,
    category: Category | None = None,
    query: str = "",
    min_severity: Severity | None = None,
) -> list[SecurityFinding]:
    """Select findings matching every given criterion.

    Args:
        findings: Findings to filter.
        severity: Keep only this exact severity.
        category: Keep only this category.
        query: Case-insensitive substring searched in title, resource and
            description. Empty matches everything.
        min_severity: Keep only findings at or above this severity.

    Returns:
        Matching findings in their original order.
    """
    needle = query.strip().lower()
    selected: list[SecurityFinding] = []
    for finding in findings:
        if severity is not None and finding.severity != severity:
            continue
        if category is not None and finding.category != category:
            continue
        if min_severity is not None and finding.severity < min_severity:
            continue
        if needle and not any(
            needle in text.lower()
            for text in (finding.title, finding.resource, finding.description)
        ):
            continue
        selected.append(finding)
    return selected


def severity_counts(findings: Iterable[SecurityFinding]) -> dict[str, int]:
    """Count findings per severity label (critical, high, medium, low).

    Findings of unknown severity are not counted.
    """
    counts = {level.label: 0 for level in COUNTED_SEVERITIES}
    for finding in findings:
        if finding.severity.label in counts:
            counts[finding.severity.label] += 1
    return counts
