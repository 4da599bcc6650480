"""Shape-tolerant access to JSON-like attribute values.

Terraform attributes are arbitrary nested values: null, booleans, numbers,
strings, lists and objects. Every checker reads them through the helpers in
this module, which classify a value into an ``AttributeKind`` and return
``None`` on any shape mismatch. A malformed attribute is therefore
indistinguishable from an absent one, and no check can raise because a
provider stored an unexpected type.

``iter_leaves`` flattens a nested value into ``(path, leaf)`` pairs with an
explicit worklist, independently of what the caller does with the leaves.
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Any, Iterator, Mapping, Sequence

logger = logging.getLogger(__name__)


class AttributeKind(Enum):
    """Variant tag for a JSON-like attribute value."""

    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    OTHER = "other"


def value_kind(value: Any) -> AttributeKind:
    """Classify ``value``. ``bool`` is never reported as a number."""
    if value is None:
        return AttributeKind.NULL
    if isinstance(value, bool):
        return AttributeKind.BOOL
    if isinstance(value, (int, float)):
        return AttributeKind.NUMBER
    if isinstance(value, str):
        return AttributeKind.STRING
    if isinstance(value, Mapping):
        return AttributeKind.MAPPING
    if isinstance(value, (list, tuple)):
        return AttributeKind.SEQUENCE
    return AttributeKind.OTHER


def as_mapping(value: Any) -> Mapping[str, Any] | None:
    return value if value_kind(value) is AttributeKind.MAPPING else None


def as_sequence(value: Any) -> Sequence[Any] | None:
    return value if value_kind(value) is AttributeKind.SEQUENCE else None


def as_string(value: Any) -> str | None:
    return value if value_kind(value) is AttributeKind.STRING else None


def as_number(value: Any) -> float | int | None:
    if value_kind(value) is not AttributeKind.NUMBER:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def first_mapping(value: Any) -> Mapping[str, Any] | None:
    """Return a nested block as a mapping.

    Terraform encodes nested blocks as lists (usually of one element), so a
    sequence whose first element is a mapping yields that element.
    """
    mapping = as_mapping(value)
    if mapping is not None:
        return mapping
    seq = as_sequence(value)
    if seq:
        return as_mapping(seq[0])
    return None


def mappings_in(value: Any) -> list[Mapping[str, Any]]:
    """Return the mapping elements of a sequence, skipping anything else."""
    seq = as_sequence(value) or ()
    return [item for item in seq if as_mapping(item) is not None]


def is_truthy(value: Any) -> bool:
    """Truthiness used by the hardening checks.

    ``None``, ``False``, zero, the empty string and empty containers are
    false. An empty nested block means the block is not configured.
    """
    kind = value_kind(value)
    if kind is AttributeKind.NUMBER:
        return as_number(value) not in (None, 0)
    if kind is AttributeKind.OTHER:
        return value is not None
    return bool(value)


def contains_string(value: Any, needle: str) -> bool:
    """Return True if ``value`` is a sequence containing the string ``needle``."""
    seq = as_sequence(value) or ()
    return any(as_string(item) == needle for item in seq)


def iter_leaves(
    value: Any,
    path: str = "",
    *,
    max_depth: int = 256,
) -> Iterator[tuple[str, Any]]:
    """Yield every ``(path, leaf)`` pair of a nested value in document order.

    Mapping keys extend the path with a dot (``a.b``), sequence indices with
    brackets (``a[0]``). A scalar at the root is yielded with the starting
    path. Empty containers yield nothing. Subtrees deeper than
    ``max_depth`` are skipped and reported once per walk.

    Args:
        value: The attribute structure to walk.
        path: Path prefix for the root value.
        max_depth: Maximum container nesting to descend into.
    """
    stack: list[tuple[str, Any, int]] = [(path, value, 0)]
    truncated = False
    while stack:
        current_path, current, depth = stack.pop()
        kind = value_kind(current)
        if kind not in (AttributeKind.MAPPING, AttributeKind.SEQUENCE):
            yield current_path, current
            continue
        if depth >= max_depth:
            if not truncated:
                logger.warning(
                    "Attribute nesting exceeds %d levels at %r; skipping subtree",
                    max_depth, current_path,
                )
                truncated = True
            continue
        children: list[tuple[str, Any, int]] = []
        if kind is AttributeKind.MAPPING:
            for key, child in current.items():
                child_path = f"{current_path}.{key}" if current_path else str(key)
                children.append((child_path, child, depth + 1))
        else:
            for idx, child in enumerate(current):
                children.append((f"{current_path}[{idx}]", child, depth + 1))
        # Reversed so the first child is popped first.
        stack.extend(reversed(children))
