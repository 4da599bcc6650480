"""Dependency resolution from Terraform state attributes.

Reconstructs the relationships between resources purely from the data held
in the state document:

1. **Explicit edges** -- one per entry of an instance's ``depends_on`` list.
   Targets are emitted verbatim, whether or not they exist in the document.
2. **Implicit edges** -- one per ``${type.name...}`` reference found in any
   string leaf of an instance's attributes, but only when the target is a
   resource of the same document and differs from the source.

The result lists every explicit edge before every implicit edge and is not
deduplicated: the same pair may appear once per instance, per attribute
path or per kind.
"""

from __future__ import annotations

import logging
from typing import Iterator, Sequence

from statescope.config import DEFAULT_SETTINGS, AnalysisSettings
from statescope.core.dependency.models import (
    DEPENDS_ON_RELATIONSHIP,
    DependencyEdge,
    EdgeKind,
)
from statescope.core.dependency.references import DEFAULT_RELATIONSHIP, find_references
from statescope.core.state.attributes import iter_leaves
from statescope.core.state.models import Resource
from statescope.exceptions import AnalysisError

logger = logging.getLogger(__name__)


class DependencyResolver:
    """Builds the dependency edge list of a set of resources.

    The resolver is stateless between calls; ``resolve()`` may run
    concurrently with the security evaluator over the same resources.

    Args:
        settings: Supplies ``max_attribute_depth`` for the attribute walk.
    """

    def __init__(self, settings: AnalysisSettings = DEFAULT_SETTINGS) -> None:
        self._settings = settings

    def resolve(self, resources: Sequence[Resource]) -> list[DependencyEdge]:
        """Return explicit edges followed by implicit edges.

        Args:
            resources: Resources in document order.

        Returns:
            The edge list. Never contains an implicit self-edge or an implicit
            edge to a resource outside ``resources``.

        Raises:
            AnalysisError: If ``resources`` is not a sequence.
        """
        if isinstance(resources, (str, bytes)) or not isinstance(resources, Sequence):
            raise AnalysisError("resolve() expects a sequence of resources")

        known = {resource.identifier for resource in resources}
        explicit = list(self._explicit_edges(resources))
        implicit = list(self._implicit_edges(resources, known))
        logger.info(
            "Resolved %d explicit and %d implicit dependencies",
            len(explicit), len(implicit),
        )
        return explicit + implicit

    def _explicit_edges(self, resources: Sequence[Resource]) -> Iterator[DependencyEdge]:
        for resource in resources:
            for instance in resource.instances:
                for target in instance.depends_on:
                    yield DependencyEdge(
                        source=resource.identifier,
                        target=target,
                        kind=EdgeKind.EXPLICIT,
                        relationship=DEPENDS_ON_RELATIONSHIP,
                    )

    def _implicit_edges(
        self, resources: Sequence[Resource], known: set[str]
    ) -> Iterator[DependencyEdge]:
        max_depth = self._settings.max_attribute_depth
        for resource in resources:
            source = resource.identifier
            for instance in resource.instances:
                for path, leaf in iter_leaves(instance.attributes, max_depth=max_depth):
                    for target in find_references(leaf):
                        if target == source or target not in known:
                            continue
                        yield DependencyEdge(
                            source=source,
                            target=target,
                            kind=EdgeKind.IMPLICIT,
                            relationship=path or DEFAULT_RELATIONSHIP,
                        )
