"""Summary statistics folded from a state document and the analysis outputs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from statescope.core.analyzer.models import SecurityFinding
from statescope.core.analyzer.scoring import compute_score
from statescope.core.dependency.models import DependencyEdge, EdgeKind
from statescope.core.report.findings import severity_counts
from statescope.core.rules.models import Severity
from statescope.core.state.attributes import as_string
from statescope.core.state.models import StateDocument

_PROVIDER_PREFIX = 'provider["'
_PROVIDER_SUFFIX = '"]'


@dataclass(frozen=True)
class ReportSummary:
    """Aggregate counts for one analyzed state document.

    Attributes:
        total_resources: Number of resources (not instances).
        resources_by_type: Resource count per type, in first-seen order.
        security_score: 0-100 score from ``compute_score``.
        critical_issues: Number of CRITICAL findings.
        severity_counts: Findings per severity label.
        dependency_counts: ``explicit``, ``implicit`` and ``total`` edge counts.
        regions: Distinct regions, first-seen order.
        providers: Distinct provider names, first-seen order.
    """

    total_resources: int
    resources_by_type: dict[str, int] = field(default_factory=dict)
    security_score: int = 100
    critical_issues: int = 0
    severity_counts: dict[str, int] = field(default_factory=dict)
    dependency_counts: dict[str, int] = field(default_factory=dict)
    regions: tuple[str, ...] = ()
    providers: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_resources": self.total_resources,
            "resources_by_type": dict(self.resources_by_type),
            "security_score": self.security_score,
            "critical_issues": self.critical_issues,
            "severity_counts": dict(self.severity_counts),
            "dependency_counts": dict(self.dependency_counts),
            "regions": list(self.regions),
            "providers": list(self.providers),
        }


def provider_name(reference: str) -> str:
    """Reduce a provider reference to a short provider name.

    The ``provider["`` / ``"]`` decoration is stripped, then everything from
    the first dot on is dropped::

        provider["aws"]                               -> aws
        provider["registry.terraform.io/hashicorp/aws"] -> registry
    """
    stripped = reference.replace(_PROVIDER_PREFIX, "", 1).replace(_PROVIDER_SUFFIX, "", 1)
    return stripped.split(".", 1)[0]


def summarize(
    document: StateDocument,
    findings: Sequence[SecurityFinding],
    edges: Sequence[DependencyEdge],
) -> ReportSummary:
    """Fold the document, findings and edges into a ``ReportSummary``."""
    by_type: dict[str, int] = {}
    regions: dict[str, None] = {}
    providers: dict[str, None] = {}

    for resource in document.resources:
        by_type[resource.type] = by_type.get(resource.type, 0) + 1
        if resource.provider:
            name = provider_name(resource.provider)
            if name:
                providers.setdefault(name, None)
        for instance in resource.instances:
            region = as_string(instance.attributes.get("region"))
            if region:
                regions.setdefault(region, None)
            zone = as_string(instance.attributes.get("availability_zone"))
            if zone and zone[:-1]:
                regions.setdefault(zone[:-1], None)

    explicit = sum(1 for edge in edges if edge.kind is EdgeKind.EXPLICIT)
    return ReportSummary(
        total_resources=document.resource_count,
        resources_by_type=by_type,
        security_score=compute_score(findings),
        critical_issues=sum(1 for f in findings if f.severity is Severity.CRITICAL),
        severity_counts=severity_counts(findings),
        dependency_counts={
            "explicit": explicit,
            "implicit": len(edges) - explicit,
            "total": len(edges),
        },
        regions=tuple(regions),
        providers=tuple(providers),
    )
