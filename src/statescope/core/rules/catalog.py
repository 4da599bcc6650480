"""Load-once, read-only catalog of hardening rules.

The packaged catalog lives in ``statescope/data/hardening_rules.yaml``.
``default_catalog()`` parses it the first time it is called and returns the
same frozen ``RuleCatalog`` on every later call, so the catalog can be
shared freely between threads. The security evaluator takes a catalog as a
constructor argument; tests build synthetic ones with
``RuleCatalog.from_rules``.

Catalog file format::

    version: "2024.06"
    rules:
      - id: aws-s3-enable-versioning
        title: S3 Bucket Versioning
        category: Data Protection
        severity: medium
        resource_type: aws_s3_bucket
        check: Ensure versioning is enabled
        example:
          compliant: "versioning { enabled = true }"
        reference:
          - https://docs.aws.amazon.com/...
"""

from __future__ import annotations

import functools
import logging
from pathlib import Path
from typing import Any, Iterable, Iterator

import yaml

from statescope.core.rules.models import (
    WILDCARD_RESOURCE_TYPE,
    HardeningRule,
    RuleExample,
    Severity,
)
from statescope.exceptions import CatalogError

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parents[2] / "data" / "hardening_rules.yaml"


class RuleCatalog:
    """An immutable, ordered collection of hardening rules.

    Rules keep their catalog order, which fixes the order in which findings
    are produced for a resource.
    """

    def __init__(self, rules: Iterable[HardeningRule], version: str = "unversioned") -> None:
        ordered = tuple(rules)
        seen: set[str] = set()
        for rule in ordered:
            if rule.id in seen:
                raise CatalogError(f"Duplicate rule id in catalog: {rule.id}")
            seen.add(rule.id)
        self._rules = ordered
        self._by_id = {rule.id: rule for rule in ordered}
        self._version = version

    @classmethod
    def from_rules(cls, *rules: HardeningRule, version: str = "test") -> RuleCatalog:
        """Build a catalog from rule objects (convenience for tests and embedding)."""
        return cls(rules, version=version)

    @property
    def version(self) -> str:
        return self._version

    @property
    def rules(self) -> tuple[HardeningRule, ...]:
        return self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[HardeningRule]:
        return iter(self._rules)

    def get(self, rule_id: str) -> HardeningRule | None:
        return self._by_id.get(rule_id)

    def rules_for(self, resource_type: str) -> tuple[HardeningRule, ...]:
        """Return rules applicable to ``resource_type``, wildcard rules included."""
        return tuple(rule for rule in self._rules if rule.applies_to(resource_type))

    def resource_types(self) -> list[str]:
        """Return the sorted concrete resource types the catalog targets."""
        return sorted({
            rule.resource_type for rule in self._rules
            if rule.resource_type != WILDCARD_RESOURCE_TYPE
        })


def load_catalog(path: Path | None = None) -> RuleCatalog:
    """Parse a YAML rule catalog.

    Args:
        path: Catalog file. Defaults to the packaged catalog.

    Returns:
        The loaded catalog.

    Raises:
        CatalogError: If the file cannot be read, is not valid YAML, has no
            ``rules`` list, or repeats a rule id.
    """
    source = path or DEFAULT_CATALOG_PATH
    try:
        raw = yaml.safe_load(source.read_text(encoding="utf-8"))
    except OSError as exc:
        raise CatalogError(f"Cannot read rule catalog {source}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise CatalogError(f"Malformed rule catalog {source}: {exc}") from exc

    if not isinstance(raw, dict) or not isinstance(raw.get("rules"), list):
        raise CatalogError(f"Rule catalog {source} has no 'rules' list")

    rules: list[HardeningRule] = []
    for position, entry in enumerate(raw["rules"]):
        rule = _build_rule(position, entry)
        if rule is not None:
            rules.append(rule)

    catalog = RuleCatalog(rules, version=str(raw.get("version", "unversioned")))
    logger.info("Loaded %d hardening rules (catalog %s)", len(catalog), catalog.version)
    return catalog


@functools.lru_cache(maxsize=1)
def default_catalog() -> RuleCatalog:
    """Return the packaged catalog, loading it on first use."""
    return load_catalog()


def _build_rule(position: int, entry: Any) -> HardeningRule | None:
    if not isinstance(entry, dict) or not entry.get("id"):
        logger.warning("Skipping catalog entry %d: not a rule with an id", position)
        return None

    rule_id = str(entry["id"])
    severity = Severity.parse(entry.get("severity"))
    if severity is Severity.UNKNOWN:
        logger.warning(
            "Rule %s has unknown severity %r; treating as unknown",
            rule_id, entry.get("severity"),
        )

    example = None
    raw_example = entry.get("example")
    if isinstance(raw_example, dict):
        example = RuleExample(
            compliant=str(raw_example.get("compliant") or ""),
            non_compliant=str(raw_example.get("non_compliant") or ""),
        )

    references = entry.get("reference") or ()
    if isinstance(references, str):
        references = (references,)
    elif not isinstance(references, (list, tuple)):
        references = ()

    return HardeningRule(
        id=rule_id,
        title=str(entry.get("title") or rule_id),
        description=str(entry.get("description") or ""),
        category=str(entry.get("category") or ""),
        severity=severity,
        provider=str(entry.get("provider") or ""),
        resource_type=str(entry.get("resource_type") or WILDCARD_RESOURCE_TYPE),
        check=str(entry.get("check") or ""),
        example=example,
        references=tuple(str(ref) for ref in references),
    )
