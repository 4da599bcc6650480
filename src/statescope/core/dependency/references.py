"""Reference-string matching for implicit dependencies.

Terraform interpolations such as ``"${aws_vpc.main.id}"`` survive in some
state files. ``find_references`` extracts the ``type.name`` part of every
such interpolation in a string; attribute suffixes (``.id``, ``.arn``) are
dropped.

The walk over nested attributes lives in
``statescope.core.state.attributes.iter_leaves``; this module only matches
strings.
"""

from __future__ import annotations

import re
from typing import Any

REFERENCE_PATTERN = re.compile(r"\$\{([^.]+\.[^.}]+)(?:\.[^}]+)?\}")

DEFAULT_RELATIONSHIP = "attribute_reference"


def find_references(text: Any) -> list[str]:
    """Return every referenced ``type.name`` in ``text``, in order of appearance.

    Non-string input yields an empty list. The same target may appear more
    than once when a string interpolates it repeatedly.
    """
    if not isinstance(text, str) or "${" not in text:
        return []
    return [match.group(1) for match in REFERENCE_PATTERN.finditer(text)]
