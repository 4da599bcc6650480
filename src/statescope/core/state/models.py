"""Typed representation of a parsed Terraform state snapshot.

These are the shared vocabulary for the analysis engine. They carry no
logic beyond identifier construction: the security evaluator, dependency
resolver and summary aggregator all read them, none of them mutate them.

Identifiers
-----------
- Resource identifier: ``"type.name"`` (e.g. ``aws_s3_bucket.logs``).
- Instance identifier: ``"type.name[index]"`` where ``index`` is the
  instance's position inside its resource.

Both forms round-trip through ``parse_resource_identifier`` and
``parse_instance_identifier``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping

_INSTANCE_ID_PATTERN = re.compile(r"^([^.\[\]]+)\.([^\[\]]+)\[(\d+)\]$")


# ---------------------------------------------------------------------------
# Instance: one concrete materialization of a resource
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Instance:
    """A single instance of a Terraform resource.

    Attributes:
        index: Position of the instance inside its resource. Preserved even
            when malformed sibling entries were dropped by the loader.
        attributes: Free-form attribute mapping (JSON-like nested values).
            Treated as read-only by every consumer.
        depends_on: Explicit dependency targets declared for this instance.
        schema_version: Provider schema version recorded in the state.
    """

    index: int
    attributes: Mapping[str, Any] = field(default_factory=dict)
    depends_on: tuple[str, ...] = ()
    schema_version: int = 0


# ---------------------------------------------------------------------------
# Resource: a declared infrastructure object
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Resource:
    """A declared resource and its ordered instances.

    Attributes:
        type: Terraform resource type (e.g. ``aws_security_group``). Selects
            the applicable rules and the attribute checker.
        name: Resource name from the configuration.
        mode: ``managed`` or ``data``.
        provider: Raw provider reference string from the state file.
        instances: Instances in state order.
    """

    type: str
    name: str
    mode: str = "managed"
    provider: str = ""
    instances: tuple[Instance, ...] = ()

    @property
    def identifier(self) -> str:
        """Return the resource identifier ``type.name``."""
        return f"{self.type}.{self.name}"

    def instance_identifier(self, instance: Instance) -> str:
        """Return the identifier ``type.name[index]`` for one of our instances."""
        return f"{self.identifier}[{instance.index}]"

    def iter_instances(self) -> Iterator[tuple[str, Instance]]:
        """Yield ``(instance_identifier, instance)`` pairs in state order."""
        for instance in self.instances:
            yield self.instance_identifier(instance), instance


# ---------------------------------------------------------------------------
# StateDocument: the whole snapshot
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StateDocument:
    """A validated Terraform state document.

    Header fields fall back to the same defaults the loader applies when the
    source omits them.
    """

    resources: tuple[Resource, ...]
    version: int = 4
    terraform_version: str = "unknown"
    serial: int = 1
    lineage: str = "unknown"
    outputs: Mapping[str, Any] = field(default_factory=dict)

    @property
    def resource_count(self) -> int:
        return len(self.resources)


def parse_resource_identifier(text: str) -> tuple[str, str]:
    """Split a ``type.name`` identifier into its two parts.

    Raises:
        ValueError: If ``text`` has no dot or an empty part.
    """
    resource_type, sep, name = text.partition(".")
    if not sep or not resource_type or not name:
        raise ValueError(f"Not a resource identifier: {text!r}")
    return resource_type, name


def parse_instance_identifier(text: str) -> tuple[str, str, int]:
    """Split a ``type.name[index]`` identifier into type, name and index.

    Raises:
        ValueError: If ``text`` is not an instance identifier.
    """
    match = _INSTANCE_ID_PATTERN.match(text)
    if match is None:
        raise ValueError(f"Not an instance identifier: {text!r}")
    return match.group(1), match.group(2), int(match.group(3))
