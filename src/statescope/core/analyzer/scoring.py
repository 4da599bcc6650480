"""Aggregate security score for a list of findings.

The score starts at 100 and loses a fixed number of points per finding,
weighted by severity. It is clamped to [0, 100]. Findings whose severity is
UNKNOWN deduct nothing.
"""

from __future__ import annotations

import math
from typing import Iterable, Mapping

from statescope.core.analyzer.models import SecurityFinding
from statescope.core.rules.models import Severity

SEVERITY_WEIGHTS: Mapping[Severity, float] = {
    Severity.CRITICAL: 25,
    Severity.HIGH: 15,
    Severity.MEDIUM: 8,
    Severity.LOW: 3,
}

MAX_SCORE = 100
# Returned when a custom weight table makes the arithmetic meaningless.
FALLBACK_SCORE = 85


def compute_score(
    findings: Iterable[SecurityFinding],
    weights: Mapping[Severity, float] = SEVERITY_WEIGHTS,
) -> int:
    """Compute the 0-100 security score for ``findings``.

    Args:
        findings: Findings to score.
        weights: Points deducted per finding, keyed by severity. Severities
            missing from the table deduct nothing.

    Returns:
        Integer score in [0, 100], or ``FALLBACK_SCORE`` if the deduction
        is not a number.
    """
    deduction = sum(weights.get(finding.severity, 0) for finding in findings)
    if math.isnan(deduction):
        return FALLBACK_SCORE
    score = max(0, min(MAX_SCORE, MAX_SCORE - deduction))
    return int(round(score))
