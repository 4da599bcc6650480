"""Load and validate Terraform state documents.

The loader is the boundary between raw input and the analysis engine. It
owns every fatal input check: file type, file size, JSON syntax and the
presence of a resource list. Anything it lets through is a
``StateDocument`` the engine can analyze without further validation.

Malformed content *inside* a resource (an instance that is not an object,
a ``depends_on`` that is not a list) is not fatal: it is dropped with a
warning so one bad entry never hides the rest of the document.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

from statescope.config import DEFAULT_SETTINGS, MAX_FILE_BYTES, AnalysisSettings
from statescope.core.state.attributes import as_mapping, as_sequence, as_string
from statescope.core.state.models import Instance, Resource, StateDocument
from statescope.exceptions import FileValidationError, StateParseError, StateShapeError

logger = logging.getLogger(__name__)

_MISSING_RESOURCES = "Invalid Terraform state file: missing resources array"


def validate_file_type(
    path: Path,
    accepted: tuple[str, ...] = DEFAULT_SETTINGS.accepted_extensions,
) -> None:
    """Reject files whose suffix is not an accepted state file extension.

    Raises:
        FileValidationError: If the suffix is not accepted.
    """
    name = path.name.lower()
    if not any(name.endswith(ext) for ext in accepted):
        raise FileValidationError(
            "Invalid file type. Please upload a .tfstate or .json file."
        )


def validate_file_size(size_bytes: int, limit: int = MAX_FILE_BYTES) -> None:
    """Reject inputs larger than ``limit`` bytes.

    Raises:
        FileValidationError: If ``size_bytes`` exceeds the limit.
    """
    if size_bytes > limit:
        limit_mb = limit // (1024 * 1024)
        raise FileValidationError(f"File size exceeds {limit_mb}MB limit.")


def parse_state(content: str | bytes | Mapping[str, Any]) -> StateDocument:
    """Build a ``StateDocument`` from JSON text or a decoded mapping.

    Args:
        content: Raw JSON (``str``/``bytes``) or an already-decoded mapping.

    Returns:
        The validated document.

    Raises:
        StateParseError: If ``content`` is not valid JSON.
        StateShapeError: If the document lacks a resource list or the list
            holds entries that are not objects.
    """
    if isinstance(content, (str, bytes)):
        try:
            raw = json.loads(content)
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as exc:
            raise StateParseError("Invalid JSON format in state file") from exc
    else:
        raw = content

    document = as_mapping(raw)
    if document is None:
        raise StateShapeError(_MISSING_RESOURCES)
    raw_resources = as_sequence(document.get("resources"))
    if raw_resources is None:
        raise StateShapeError(_MISSING_RESOURCES)

    resources = tuple(
        _build_resource(position, entry) for position, entry in enumerate(raw_resources)
    )
    logger.info("Parsed state document with %d resources", len(resources))

    return StateDocument(
        resources=resources,
        version=_int_or(document.get("version"), 4),
        terraform_version=as_string(document.get("terraform_version")) or "unknown",
        serial=_int_or(document.get("serial"), 1),
        lineage=as_string(document.get("lineage")) or "unknown",
        outputs=as_mapping(document.get("outputs")) or {},
    )


def load_state_file(
    path: Path,
    settings: AnalysisSettings = DEFAULT_SETTINGS,
) -> StateDocument:
    """Validate, read and parse a state file from disk.

    Raises:
        FileValidationError: Wrong extension or file too large.
        StateParseError: The file cannot be read or is not valid JSON.
        StateShapeError: The JSON lacks a resource list.
    """
    validate_file_type(path, settings.accepted_extensions)
    try:
        size = path.stat().st_size
    except OSError as exc:
        raise StateParseError("Failed to read file") from exc
    validate_file_size(size, settings.max_file_bytes)
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise StateParseError("Failed to read file") from exc
    return parse_state(content)


# ---------------------------------------------------------------------------
# Internal builders
# ---------------------------------------------------------------------------


def _build_resource(position: int, entry: Any) -> Resource:
    raw = as_mapping(entry)
    if raw is None:
        raise StateShapeError(
            f"Invalid Terraform state file: resource entry {position} is not an object"
        )
    resource_type = as_string(raw.get("type")) or ""
    name = as_string(raw.get("name")) or ""
    if not resource_type or not name:
        logger.warning("Resource entry %d has no type or name", position)

    instances: list[Instance] = []
    raw_instances = raw.get("instances")
    if raw_instances is not None and as_sequence(raw_instances) is None:
        logger.warning("Resource %s.%s: instances is not a list", resource_type, name)
    for index, item in enumerate(as_sequence(raw_instances) or ()):
        instance = _build_instance(index, item)
        if instance is None:
            logger.warning(
                "Skipping malformed instance %s.%s[%d]", resource_type, name, index
            )
            continue
        instances.append(instance)

    return Resource(
        type=resource_type,
        name=name,
        mode=as_string(raw.get("mode")) or "managed",
        provider=as_string(raw.get("provider")) or "",
        instances=tuple(instances),
    )


def _build_instance(index: int, item: Any) -> Instance | None:
    raw = as_mapping(item)
    if raw is None:
        return None
    attributes = as_mapping(raw.get("attributes")) or {}
    depends_on = tuple(
        target for target in (as_sequence(raw.get("depends_on")) or ())
        if isinstance(target, str)
    )
    return Instance(
        index=index,
        attributes=attributes,
        depends_on=depends_on,
        schema_version=_int_or(raw.get("schema_version"), 0),
    )


def _int_or(value: Any, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value == 0:
        return default
    return value
