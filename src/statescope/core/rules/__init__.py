"""Hardening rule catalog.

Submodules
----------
- ``models``: ``Severity``, ``Category``, ``HardeningRule`` and category mapping.
- ``catalog``: YAML loading and the load-once ``default_catalog()``.
- ``intent``: ``classify_intent``, the keyword heuristic mapping rules to checks.

All public names are re-exported here::

    from statescope.core.rules import HardeningRule, RuleCatalog, Severity
"""

from statescope.core.rules.catalog import RuleCatalog, default_catalog, load_catalog
from statescope.core.rules.intent import Intent, classify_intent
from statescope.core.rules.models import (
    Category,
    HardeningRule,
    RuleExample,
    Severity,
    map_category,
)

__all__ = [
    "Category",
    "HardeningRule",
    "Intent",
    "RuleCatalog",
    "RuleExample",
    "Severity",
    "classify_intent",
    "default_catalog",
    "load_catalog",
    "map_category",
]
