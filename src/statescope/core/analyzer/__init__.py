"""Security evaluator for Terraform state resources.

Given the resources of a ``StateDocument`` and a ``RuleCatalog``, the
``SecurityEvaluator`` produces deduplicated ``SecurityFinding`` objects and
``compute_score`` folds them into a 0-100 security score.

Two Passes
----------

**Catalog pass:**
    Each hardening rule applicable to a resource type is dispatched to the
    checker registered for that type in a ``CheckerRegistry``. The checker
    decides which attribute condition to test from the rule's intents.

**Legacy pass:**
    Fixed heuristics, independent of the catalog, for the most common risk
    patterns.

Submodules
----------
- ``models``: ``SecurityFinding``.
- ``checkers``: Per-resource-type checkers and the ``CheckerRegistry``.
- ``legacy``: Catalog-independent heuristics.
- ``engine``: ``SecurityEvaluator`` and ``deduplicate_findings``.
- ``scoring``: ``compute_score`` and the severity weight table.

All public names are re-exported here::

    from statescope.core.analyzer import SecurityEvaluator, SecurityFinding, compute_score
"""

from statescope.core.analyzer.checkers import CheckerRegistry, default_checkers
from statescope.core.analyzer.engine import SecurityEvaluator, deduplicate_findings
from statescope.core.analyzer.models import SecurityFinding
from statescope.core.analyzer.scoring import SEVERITY_WEIGHTS, compute_score

__all__ = [
    "CheckerRegistry",
    "SEVERITY_WEIGHTS",
    "SecurityEvaluator",
    "SecurityFinding",
    "compute_score",
    "deduplicate_findings",
    "default_checkers",
]
