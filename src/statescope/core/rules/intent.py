"""Keyword-based classification of what a hardening rule checks.

Rules are free text: the catalog does not say which attribute condition a
rule corresponds to. The checkers instead look for keywords in the rule id
and check text. ``classify_intent`` is the only place those keywords live,
so the heuristic can be inspected and tested on its own.

Matching is plain substring search. It over-matches
("log" inside "catalog") and under-matches (a rule about "TLS" never maps
to encryption); checkers depend on that exact behavior.
"""

from __future__ import annotations

from enum import Enum

from statescope.core.rules.models import HardeningRule


class Intent(str, Enum):
    """A condition family a checker knows how to test."""

    PUBLIC_ACCESS = "public_access"
    ENCRYPTION = "encryption"
    VERSIONING = "versioning"
    LOGGING = "logging"
    PRIVILEGE = "privilege"
    BACKUP = "backup"
    DELETION = "deletion"
    METADATA = "metadata"
    RESTRICT = "restrict"
    DANGEROUS_PORT = "dangerous_port"


# Keywords matched against both the rule id and the lower-cased check text.
_SHARED_KEYWORDS: tuple[tuple[str, Intent], ...] = (
    ("public", Intent.PUBLIC_ACCESS),
    ("encrypt", Intent.ENCRYPTION),
    ("version", Intent.VERSIONING),
    ("log", Intent.LOGGING),
    ("privilege", Intent.PRIVILEGE),
    ("backup", Intent.BACKUP),
    ("deletion", Intent.DELETION),
    ("metadata", Intent.METADATA),
    ("restrict", Intent.RESTRICT),
)

# Keywords matched against the rule id only.
_ID_ONLY_KEYWORDS: tuple[tuple[str, Intent], ...] = (
    ("ssh", Intent.DANGEROUS_PORT),
    ("rdp", Intent.DANGEROUS_PORT),
)


def classify_intent(rule: HardeningRule, *, include_id: bool = True) -> frozenset[Intent]:
    """Return the set of intents a rule's id and check text suggest.

    The rule id is matched case-sensitively; the check text is lower-cased
    first.

    Args:
        rule: The rule to classify.
        include_id: When False, only the check text is consulted (the
            generic checker's behavior).

    Returns:
        Frozen set of matched intents, possibly empty.
    """
    check = rule.check.lower()
    intents: set[Intent] = set()
    for keyword, intent in _SHARED_KEYWORDS:
        if keyword in check or (include_id and keyword in rule.id):
            intents.add(intent)
    if include_id:
        for keyword, intent in _ID_ONLY_KEYWORDS:
            if keyword in rule.id:
                intents.add(intent)
    return frozenset(intents)
