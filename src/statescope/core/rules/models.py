"""Data models for the hardening rule catalog: Severity, Category, HardeningRule.

These types are shared by the catalog loader and the security evaluator.
They live apart from the evaluator so that the catalog can be loaded,
listed and tested without pulling in any checker logic.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any


# ---------------------------------------------------------------------------
# Severity: Ordered finding severity levels
# ---------------------------------------------------------------------------


class Severity(IntEnum):
    """Four-level severity scale plus an UNKNOWN bucket.

    The integer encoding enables direct comparison:
    UNKNOWN < LOW < MEDIUM < HIGH < CRITICAL. UNKNOWN absorbs any severity
    string outside the defined set; it ranks lowest and never affects the
    security score.
    """

    UNKNOWN = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4

    @property
    def label(self) -> str:
        """Lower-case name used in reports (``"critical"``, ``"unknown"``)."""
        return self.name.lower()

    @classmethod
    def parse(cls, value: Any) -> Severity:
        """Normalize ``value`` to a Severity. Unrecognized input is UNKNOWN."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                return cls.UNKNOWN
        return cls.UNKNOWN


# ---------------------------------------------------------------------------
# Category: Finding categories
# ---------------------------------------------------------------------------


class Category(str, Enum):
    """The four finding categories used across reports."""

    PUBLIC_EXPOSURE = "public_exposure"
    ENCRYPTION = "encryption"
    ACCESS_CONTROL = "access_control"
    COMPLIANCE = "compliance"

    @classmethod
    def parse(cls, value: Any) -> Category:
        """Normalize ``value`` to a Category. Unrecognized input is COMPLIANCE."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.COMPLIANCE


def map_category(text: str) -> Category:
    """Derive a Category from a rule's free-text category field.

    Keyword order matters: a field mentioning both "public" and "encrypt"
    maps to PUBLIC_EXPOSURE.
    """
    lowered = (text or "").lower()
    if "public" in lowered or "exposure" in lowered:
        return Category.PUBLIC_EXPOSURE
    if "encrypt" in lowered:
        return Category.ENCRYPTION
    if "access" in lowered or "iam" in lowered or "privilege" in lowered:
        return Category.ACCESS_CONTROL
    return Category.COMPLIANCE


# ---------------------------------------------------------------------------
# HardeningRule: One catalog entry
# ---------------------------------------------------------------------------

WILDCARD_RESOURCE_TYPE = "all"


@dataclass(frozen=True)
class RuleExample:
    """Compliant / non-compliant configuration snippets for a rule."""

    compliant: str = ""
    non_compliant: str = ""


@dataclass(frozen=True)
class HardeningRule:
    """A single hardening best practice and how to detect its violation.

    Attributes:
        id: Unique rule identifier. Also scanned for intent keywords.
        title: Short rule name; becomes the finding title.
        description: Longer explanation; becomes the finding description.
        category: Free-text category as written in the catalog.
        severity: Normalized severity.
        provider: Cloud provider the rule targets (informational).
        resource_type: Concrete resource type, or ``"all"``.
        check: Free-text description of the check, scanned for intent
            keywords.
        example: Optional compliant / non-compliant snippets.
        references: Documentation links, most relevant first.
    """

    id: str
    title: str
    description: str = ""
    category: str = ""
    severity: Severity = Severity.UNKNOWN
    provider: str = ""
    resource_type: str = WILDCARD_RESOURCE_TYPE
    check: str = ""
    example: RuleExample | None = None
    references: tuple[str, ...] = ()

    @property
    def mapped_category(self) -> Category:
        return map_category(self.category)

    @property
    def is_wildcard(self) -> bool:
        return self.resource_type == WILDCARD_RESOURCE_TYPE

    def applies_to(self, resource_type: str) -> bool:
        """Return True if this rule should be evaluated for ``resource_type``."""
        return self.resource_type == resource_type or self.is_wildcard

    def remediation(self) -> str:
        """Build the remediation hint attached to findings from this rule."""
        base = f"Follow {self.title} best practices. "
        if self.example is not None and self.example.compliant:
            return base + f"Example compliant configuration: {self.example.compliant}"
        if self.references:
            return base + f"Refer to: {self.references[0]}"
        return base + self.check
