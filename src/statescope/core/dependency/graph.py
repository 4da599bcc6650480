"""Node/link projection of resources and their dependency edges.

``build_graph`` turns a resource list and an edge list into a
``ResourceGraph``: one node per resource plus the edge list as links. The
graph is a read-only view; filtering returns a new graph.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from statescope.core.dependency.models import DependencyEdge
from statescope.core.state.models import Resource


# ---------------------------------------------------------------------------
# GraphNode: one vertex per resource
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GraphNode:
    """A resource as a graph vertex.

    Attributes:
        id: Resource identifier ``type.name``.
        type: Resource type.
        name: Resource name.
        provider: Raw provider reference string.
        dependency_count: Number of edges with this node as source or target.
    """

    id: str
    type: str
    name: str
    provider: str
    dependency_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "name": self.name,
            "provider": self.provider,
            "dependency_count": self.dependency_count,
        }


# ---------------------------------------------------------------------------
# ResourceGraph: nodes plus links
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ResourceGraph:
    """Nodes in document order and links in resolver order."""

    nodes: tuple[GraphNode, ...]
    links: tuple[DependencyEdge, ...]

    def node(self, node_id: str) -> GraphNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def edges_for(self, node_id: str) -> list[DependencyEdge]:
        """Return every link with ``node_id`` as source or target."""
        return [link for link in self.links if node_id in (link.source, link.target)]

    def filter_by_type(self, resource_type: str) -> ResourceGraph:
        """Keep nodes of ``resource_type`` and the links between them.

        ``"all"`` returns the graph unchanged. Dependency counts are carried
        over from the full graph.
        """
        if resource_type == "all":
            return self
        nodes = tuple(node for node in self.nodes if node.type == resource_type)
        kept = {node.id for node in nodes}
        links = tuple(
            link for link in self.links if link.source in kept and link.target in kept
        )
        return ResourceGraph(nodes=nodes, links=links)

    def resource_types(self) -> list[str]:
        """Return the distinct node types, sorted."""
        return sorted({node.type for node in self.nodes})

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "links": [link.to_dict() for link in self.links],
        }


def build_graph(
    resources: Sequence[Resource], edges: Iterable[DependencyEdge]
) -> ResourceGraph:
    """Project resources and edges into a ``ResourceGraph``.

    Args:
        resources: Resources in document order; one node each.
        edges: Resolver output; kept as links unchanged.

    Returns:
        The graph. A self-referencing explicit edge counts once for its node.
    """
    links = tuple(edges)
    touches: Counter[str] = Counter()
    for link in links:
        touches[link.source] += 1
        if link.target != link.source:
            touches[link.target] += 1
    nodes = tuple(
        GraphNode(
            id=resource.identifier,
            type=resource.type,
            name=resource.name,
            provider=resource.provider,
            dependency_count=touches[resource.identifier],
        )
        for resource in resources
    )
    return ResourceGraph(nodes=nodes, links=links)
