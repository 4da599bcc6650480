"""End-to-end analysis of a parsed state document.

``analyze_state`` runs the security evaluator and the dependency resolver
concurrently on a two-worker thread pool, waits for both, then folds their
outputs into an ``AnalysisReport``. Both stages only read the document and
the catalog, so they share nothing mutable.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Iterable

from statescope.config import DEFAULT_SETTINGS, AnalysisSettings
from statescope.core.analyzer.engine import SecurityEvaluator
from statescope.core.analyzer.models import SecurityFinding
from statescope.core.dependency.graph import ResourceGraph, build_graph
from statescope.core.dependency.models import DependencyEdge
from statescope.core.dependency.resolver import DependencyResolver
from statescope.core.report.summary import ReportSummary, summarize
from statescope.core.rules.catalog import RuleCatalog, default_catalog
from statescope.core.state.models import StateDocument

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisReport:
    """Everything derived from one state document.

    Attributes:
        document: The analyzed document.
        findings: Deduplicated findings in discovery order.
        dependencies: Explicit edges followed by implicit edges.
        graph: Node/link projection of the resources and dependencies.
        summary: Aggregate counts and the security score.
    """

    document: StateDocument
    findings: tuple[SecurityFinding, ...]
    dependencies: tuple[DependencyEdge, ...]
    graph: ResourceGraph
    summary: ReportSummary

    def to_dict(
        self, findings: Iterable[SecurityFinding] | None = None
    ) -> dict[str, Any]:
        """Return the JSON report.

        Resources themselves are omitted; the graph nodes identify them.

        Args:
            findings: Findings to emit instead of ``self.findings`` (for
                example after threshold filtering). The summary is unchanged.
        """
        selected = self.findings if findings is None else findings
        return {
            "terraform_version": self.document.terraform_version,
            "serial": self.document.serial,
            "lineage": self.document.lineage,
            "summary": self.summary.to_dict(),
            "security_issues": [finding.to_dict() for finding in selected],
            "dependencies": [edge.to_dict() for edge in self.dependencies],
            "graph": self.graph.to_dict(),
        }


def analyze_state(
    document: StateDocument,
    catalog: RuleCatalog | None = None,
    settings: AnalysisSettings | None = None,
) -> AnalysisReport:
    """Evaluate and resolve ``document`` concurrently and build the report.

    Args:
        document: Parsed state document.
        catalog: Rule catalog. Defaults to the packaged catalog.
        settings: Engine settings. Defaults to ``DEFAULT_SETTINGS``.

    Returns:
        The ``AnalysisReport``.
    """
    settings = settings or DEFAULT_SETTINGS
    catalog = catalog if catalog is not None else default_catalog()
    evaluator = SecurityEvaluator(catalog, settings=settings)
    resolver = DependencyResolver(settings)

    logger.info(
        "Analyzing %d resources against %d rules (catalog %s)",
        document.resource_count, len(catalog), catalog.version,
    )
    with ThreadPoolExecutor(max_workers=2) as pool:
        findings_future = pool.submit(evaluator.evaluate, document.resources)
        edges_future = pool.submit(resolver.resolve, document.resources)
        findings = findings_future.result()
        edges = edges_future.result()

    return AnalysisReport(
        document=document,
        findings=tuple(findings),
        dependencies=tuple(edges),
        graph=build_graph(document.resources, edges),
        summary=summarize(document, findings, edges),
    )
