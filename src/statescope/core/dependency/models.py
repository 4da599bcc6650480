"""Data models for the dependency resolver: EdgeKind and DependencyEdge."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

DEPENDS_ON_RELATIONSHIP = "depends_on"


class EdgeKind(str, Enum):
    """How a dependency was discovered.

    EXPLICIT edges come from an instance's declared ``depends_on`` list.
    IMPLICIT edges come from ``${type.name...}`` references found inside
    attribute string values.
    """

    EXPLICIT = "explicit"
    IMPLICIT = "implicit"


@dataclass(frozen=True)
class DependencyEdge:
    """A directed relationship from one resource to another.

    Attributes:
        source: Resource identifier (``type.name``) of the declaring resource.
        target: Resource identifier of the depended-on resource. Explicit
            targets are kept exactly as written in the state file.
        kind: Whether the edge was declared or inferred.
        relationship: ``"depends_on"`` for explicit edges, otherwise the
            attribute path the reference was found at.
    """

    source: str
    target: str
    kind: EdgeKind
    relationship: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "type": self.kind.value,
            "relationship": self.relationship,
        }
