"""Security evaluation engine for Terraform state resources.

This module implements the ``SecurityEvaluator`` class, which runs two
independent passes over every resource instance and merges the results:

1. **Catalog pass** -- every hardening rule applicable to the resource type
   (plus wildcard rules) is dispatched to the checker registered for that
   type. Each violation becomes one finding carrying the rule's metadata.
2. **Legacy pass** -- fixed heuristics from ``legacy.py`` that do not depend
   on the catalog.

Both passes emit the same ``SecurityFinding`` shape. The merged list is
deduplicated on ``(resource, category, title)``, first occurrence wins, in
one sequential step after all evaluation has finished.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable, Mapping, Sequence

from statescope.config import DEFAULT_SETTINGS, AnalysisSettings
from statescope.core.analyzer.checkers import (
    POLICY_PARSE_ERROR,
    CheckerRegistry,
    default_checkers,
)
from statescope.core.analyzer.legacy import legacy_findings
from statescope.core.analyzer.models import SecurityFinding
from statescope.core.rules.catalog import RuleCatalog, default_catalog
from statescope.core.rules.models import Category, HardeningRule
from statescope.core.state.models import Resource
from statescope.exceptions import AnalysisError

logger = logging.getLogger(__name__)

UNREADABLE_POLICY_TITLE = "Unreadable Policy Document"


class SecurityEvaluator:
    """Applies a rule catalog and the legacy heuristics to state resources.

    The evaluator holds no per-run state: ``evaluate()`` calls are
    independent and may run concurrently. The catalog and checker registry
    are read-only after construction.

    Usage::

        evaluator = SecurityEvaluator(default_catalog())
        findings = evaluator.evaluate(document.resources)
        score = compute_score(findings)
    """

    def __init__(
        self,
        catalog: RuleCatalog | None = None,
        checkers: CheckerRegistry | None = None,
        settings: AnalysisSettings = DEFAULT_SETTINGS,
    ) -> None:
        self._catalog = catalog if catalog is not None else default_catalog()
        self._checkers = checkers or default_checkers()
        self._settings = settings

    @property
    def catalog(self) -> RuleCatalog:
        return self._catalog

    def evaluate(
        self,
        resources: Sequence[Resource],
        max_workers: int | None = None,
    ) -> list[SecurityFinding]:
        """Evaluate every instance of every resource and return deduplicated findings.

        Args:
            resources: Resources in document order.
            max_workers: Worker threads for per-resource evaluation.
                Defaults to the settings value. Parallelism only kicks in
                above ``settings.parallel_threshold`` resources; output order
                is the same either way.

        Returns:
            Findings in discovery order, deduplicated.

        Raises:
            AnalysisError: If ``resources`` is not a sequence.
        """
        if isinstance(resources, (str, bytes)) or not isinstance(resources, Sequence):
            raise AnalysisError("evaluate() expects a sequence of resources")

        workers = max_workers if max_workers is not None else self._settings.max_workers
        if workers and workers > 1 and len(resources) >= self._settings.parallel_threshold:
            logger.debug("Evaluating %d resources on %d workers", len(resources), workers)
            with ThreadPoolExecutor(max_workers=workers) as pool:
                per_resource = list(pool.map(self.evaluate_resource, resources))
        else:
            per_resource = [self.evaluate_resource(resource) for resource in resources]

        merged = [finding for batch in per_resource for finding in batch]
        findings = deduplicate_findings(merged)
        logger.info(
            "Evaluated %d resources: %d findings (%d before dedup)",
            len(resources), len(findings), len(merged),
        )
        return findings

    def evaluate_resource(self, resource: Resource) -> list[SecurityFinding]:
        """Return the catalog findings, then the legacy findings, for one resource.

        The result is not deduplicated.
        """
        findings = self._apply_rules(resource)
        findings.extend(legacy_findings(resource))
        return findings

    # -- Catalog pass --

    def _apply_rules(self, resource: Resource) -> list[SecurityFinding]:
        rules = self._catalog.rules_for(resource.type)
        if not rules:
            return []
        findings: list[SecurityFinding] = []
        for instance_id, instance in resource.iter_instances():
            for rule in rules:
                violation = self._check(resource.type, rule, instance.attributes, instance_id)
                if violation is not None:
                    findings.append(_rule_finding(rule, instance_id, violation))
        return findings

    def _check(
        self,
        resource_type: str,
        rule: HardeningRule,
        attrs: Mapping[str, Any],
        instance_id: str,
    ) -> dict[str, Any] | None:
        try:
            return self._checkers.check(resource_type, rule, attrs)
        except Exception:
            logger.warning(
                "Checker failed for rule %s on %s", rule.id, instance_id, exc_info=True
            )
            return None


def _rule_finding(
    rule: HardeningRule, instance_id: str, violation: dict[str, Any]
) -> SecurityFinding:
    details = {
        "rule_id": rule.id,
        "check": rule.check,
        "violation": violation,
        "references": list(rule.references),
    }
    if violation.get("violation") == POLICY_PARSE_ERROR:
        return SecurityFinding(
            id=f"{rule.id}-{instance_id}",
            severity=rule.severity,
            category=Category.ACCESS_CONTROL,
            title=UNREADABLE_POLICY_TITLE,
            description=(
                "The policy document could not be parsed, so its permissions "
                f"were not verified: {violation.get('error', '')}"
            ),
            resource=instance_id,
            remediation="Store the policy as valid JSON and re-run the analysis.",
            details=details,
        )
    return SecurityFinding(
        id=f"{rule.id}-{instance_id}",
        severity=rule.severity,
        category=rule.mapped_category,
        title=rule.title,
        description=rule.description,
        resource=instance_id,
        remediation=rule.remediation(),
        details=details,
    )


def deduplicate_findings(findings: Iterable[SecurityFinding]) -> list[SecurityFinding]:
    """Drop findings whose ``(resource, category, title)`` was already seen.

    The first occurrence wins and discovery order is preserved, so applying
    this twice returns the same list.
    """
    seen: set[tuple[str, str, str]] = set()
    unique: list[SecurityFinding] = []
    for finding in findings:
        key = finding.dedup_key
        if key in seen:
            continue
        seen.add(key)
        unique.append(finding)
    return unique
