"""Data models for the security evaluator: SecurityFinding.

Findings are produced by the evaluator and consumed read-only by the
summary aggregator, CLI formatters and any external report renderer. They
are decoupled from the checkers so downstream code can import them without
pulling in the rule catalog or evaluation logic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from statescope.core.rules.models import Category, Severity


@dataclass(frozen=True)
class SecurityFinding:
    """One detected rule violation for one resource instance.

    Findings are immutable (frozen) once created.

    Attributes:
        id: Deterministic identifier. ``"{rule_id}-{resource}"`` for
            catalog findings, ``"{resource}-{suffix}"`` for legacy ones.
        severity: Normalized severity.
        category: Normalized category.
        title: Short human-readable title. Part of the dedup key.
        description: Explanation of the problem.
        resource: Instance identifier ``type.name[index]``.
        remediation: Suggested fix.
        details: Evidence supporting the finding (rule id, violated
            condition, offending attribute values).
    """

    id: str
    severity: Severity
    category: Category
    title: str
    description: str
    resource: str
    remediation: str
    details: Mapping[str, Any] = field(default_factory=dict, compare=False)

    @property
    def dedup_key(self) -> tuple[str, str, str]:
        """Key under which two findings count as the same issue."""
        return (self.resource, self.category.value, self.title)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable view of the finding."""
        return {
            "id": self.id,
            "severity": self.severity.label,
            "category": self.category.value,
            "title": self.title,
            "description": self.description,
            "resource": self.resource,
            "remediation": self.remediation,
            "details": dict(self.details),
        }
