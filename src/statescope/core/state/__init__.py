"""State document model and loader.

Submodules
----------
- ``models``: ``StateDocument``, ``Resource``, ``Instance`` and identifier parsing.
- ``attributes``: Shape-tolerant accessors and the leaf walker for nested values.
- ``loader``: File/JSON validation producing a ``StateDocument``.

All public names are re-exported here::

    from statescope.core.state import StateDocument, Resource, Instance, parse_state
"""

from statescope.core.state.loader import (
    load_state_file,
    parse_state,
    validate_file_size,
    validate_file_type,
)
from statescope.core.state.models import (
    Instance,
    Resource,
    StateDocument,
    parse_instance_identifier,
    parse_resource_identifier,
)

__all__ = [
    "Instance",
    "Resource",
    "StateDocument",
    "load_state_file",
    "parse_instance_identifier",
    "parse_resource_identifier",
    "parse_state",
    "validate_file_size",
    "validate_file_type",
]
