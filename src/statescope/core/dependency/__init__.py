"""Dependency resolution and graph projection for Terraform state resources.

Submodules
----------
- ``models``: ``EdgeKind`` and ``DependencyEdge``.
- ``references``: ``find_references`` and the interpolation pattern.
- ``resolver``: ``DependencyResolver`` (explicit then implicit edges).
- ``graph``: ``GraphNode``, ``ResourceGraph`` and ``build_graph``.

All public names are re-exported here::

    from statescope.core.dependency import DependencyResolver, build_graph
"""

from statescope.core.dependency.graph import GraphNode, ResourceGraph, build_graph
from statescope.core.dependency.models import DependencyEdge, EdgeKind
from statescope.core.dependency.references import (
    DEFAULT_RELATIONSHIP,
    REFERENCE_PATTERN,
    find_references,
)
from statescope.core.dependency.resolver import DependencyResolver

__all__ = [
    "DEFAULT_RELATIONSHIP",
    "DependencyEdge",
    "DependencyResolver",
    "EdgeKind",
    "GraphNode",
    "REFERENCE_PATTERN",
    "ResourceGraph",
    "build_graph",
    "find_references",
]
