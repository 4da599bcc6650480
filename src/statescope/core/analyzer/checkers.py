"""Resource-type-specific attribute checkers for hardening rules.

A checker receives a rule and an instance's attributes and answers one
question: does this instance violate this rule? It returns a *violation*
mapping describing the first condition found to be true, or ``None``.

Which condition a checker tests is decided by the rule's intents (see
``statescope.core.rules.intent``). Conditions are tested in a fixed order
per checker and the first hit wins, so a rule whose text mentions both
"public" and "encrypt" reports at most one violation per instance.

Checkers are registered in a ``CheckerRegistry`` keyed by resource type.
Types without a dedicated checker fall back to ``check_generic``. Adding a
resource type means registering one function, not editing a conditional.

Every attribute is read through the shape-tolerant accessors in
``statescope.core.state.attributes``: a missing or malformed field is
"condition not proven", never an exception.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Iterable, Mapping

from statescope.core.rules.intent import Intent, classify_intent
from statescope.core.rules.models import HardeningRule
from statescope.core.state.attributes import (
    as_mapping,
    as_number,
    as_sequence,
    as_string,
    contains_string,
    first_mapping,
    is_truthy,
    mappings_in,
)

Violation = dict[str, Any]
Checker = Callable[[HardeningRule, Mapping[str, Any]], "Violation | None"]

OPEN_CIDR = "0.0.0.0/0"
DANGEROUS_PORTS: frozenset[int] = frozenset({22, 3389, 1433, 3306, 5432})
MIN_BACKUP_RETENTION_DAYS = 7
POLICY_PARSE_ERROR = "policy_parse_error"

_PUBLIC_ACLS = {"public-read", "public-read-write"}
_ADMIN_ACTION_PREFIXES = ("iam:", "s3:", "ec2:")
_GENERIC_ENCRYPTION_FIELDS = ("encrypted", "encryption", "kms_key_id", "server_side_encryption")
_GENERIC_PUBLIC_FIELDS = ("public", "publicly_accessible", "public_access")


# ---------------------------------------------------------------------------
# Storage bucket
# ---------------------------------------------------------------------------


def check_storage_bucket(rule: HardeningRule, attrs: Mapping[str, Any]) -> Violation | None:
    """Public ACL or website, missing encryption, versioning and access logging."""
    intents = classify_intent(rule)

    if Intent.PUBLIC_ACCESS in intents:
        acl = as_string(attrs.get("acl"))
        if acl in _PUBLIC_ACLS:
            return {"violation": "public_acl", "acl": acl}
        website = attrs.get("website")
        if is_truthy(website) and not is_truthy(attrs.get("block_public_acls")):
            return {"violation": "public_website", "website": website}

    if Intent.ENCRYPTION in intents:
        if not is_truthy(attrs.get("server_side_encryption_configuration")):
            return {"violation": "no_encryption", "encryption": None}

    if Intent.VERSIONING in intents:
        versioning = first_mapping(attrs.get("versioning"))
        if versioning is None or not is_truthy(versioning.get("enabled")):
            return {"violation": "no_versioning", "versioning": attrs.get("versioning")}

    if Intent.LOGGING in intents:
        if not is_truthy(attrs.get("logging")):
            return {"violation": "no_logging", "logging": None}

    return None


# ---------------------------------------------------------------------------
# Ingress / egress rule sets
# ---------------------------------------------------------------------------


def _is_standalone_rule(attrs: Mapping[str, Any]) -> bool:
    return as_string(attrs.get("type")) in ("ingress", "egress")


def _group_entries(attrs: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    """Return the rule entries of a security group.

    ``ingress`` is used whenever present, even if empty; ``egress`` only
    when ``ingress`` is absent.
    """
    ingress = attrs.get("ingress")
    if ingress is not None:
        return mappings_in(ingress)
    return mappings_in(attrs.get("egress"))


def _open_to_world(entry: Mapping[str, Any]) -> bool:
    return contains_string(entry.get("cidr_blocks"), OPEN_CIDR)


def check_network_rules(rule: HardeningRule, attrs: Mapping[str, Any]) -> Violation | None:
    """Open CIDR ranges and internet-exposed administrative ports."""
    intents = classify_intent(rule)
    standalone = _is_standalone_rule(attrs)

    if Intent.RESTRICT in intents:
        if standalone and _open_to_world(attrs):
            return {
                "violation": "public_access",
                "cidr_blocks": list(attrs.get("cidr_blocks") or []),
                "port": attrs.get("from_port"),
                "protocol": attrs.get("protocol"),
            }
        if not standalone:
            for entry in _group_entries(attrs):
                if _open_to_world(entry):
                    return {
                        "violation": "public_access_in_group",
                        "rule": dict(entry),
                        "port": entry.get("from_port"),
                        "protocol": entry.get("protocol"),
                    }

    if Intent.DANGEROUS_PORT in intents:
        if standalone:
            entries: Iterable[Mapping[str, Any]] = (
                [attrs] if as_string(attrs.get("type")) == "ingress" else []
            )
        else:
            entries = mappings_in(attrs.get("ingress"))
        for entry in entries:
            port = as_number(entry.get("from_port"))
            if port in DANGEROUS_PORTS and _open_to_world(entry):
                return {
                    "violation": "dangerous_port_exposed",
                    "port": port,
                    "protocol": entry.get("protocol"),
                }

    return None


# ---------------------------------------------------------------------------
# Identity policies
# ---------------------------------------------------------------------------


def parse_policy_document(policy: Any) -> Mapping[str, Any] | None:
    """Decode an IAM policy stored either as a mapping or as JSON text.

    Returns:
        The decoded policy, or None when ``policy`` is absent or is neither
        a mapping nor a string.

    Raises:
        ValueError: If ``policy`` is a string that is not valid JSON or
            nests too deeply to decode.
    """
    if isinstance(policy, str):
        try:
            return as_mapping(json.loads(policy))
        except RecursionError as exc:
            raise ValueError("policy document is nested too deeply to decode") from exc
    return as_mapping(policy)


def policy_statements(policy: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    """Return the statements of a policy; a lone statement object is accepted."""
    statements = policy.get("Statement")
    single = as_mapping(statements)
    if single is not None:
        return [single]
    return mappings_in(statements)


def _targets(value: Any) -> list[str]:
    """Normalize an Action/Resource value (string or list) to a list of strings."""
    if isinstance(value, str):
        return [value]
    return [item for item in (as_sequence(value) or ()) if isinstance(item, str)]


def _is_admin_action(action: str) -> bool:
    return "*" in action and action.startswith(_ADMIN_ACTION_PREFIXES)


def check_identity_policy(rule: HardeningRule, attrs: Mapping[str, Any]) -> Violation | None:
    """Wildcard actions, administrative wildcards and wildcard resources."""
    if Intent.PRIVILEGE not in classify_intent(rule):
        return None

    try:
        policy = parse_policy_document(attrs.get("policy"))
    except ValueError as exc:
        return {"violation": POLICY_PARSE_ERROR, "error": str(exc)}
    if policy is None:
        return None

    for statement in policy_statements(policy):
        if statement.get("Effect") != "Allow":
            continue
        actions = _targets(statement.get("Action"))
        resources = _targets(statement.get("Resource"))

        if "*" in actions:
            return {
                "violation": "wildcard_action",
                "statement": dict(statement),
                "resources": statement.get("Resource"),
            }
        admin_actions = [action for action in actions if _is_admin_action(action)]
        if admin_actions and "*" in resources:
            return {
                "violation": "admin_permissions",
                "statement": dict(statement),
                "admin_actions": admin_actions,
            }
        if "*" in resources:
            return {
                "violation": "wildcard_resource",
                "statement": dict(statement),
                "actions": statement.get("Action"),
            }

    return None


# ---------------------------------------------------------------------------
# Compute instances
# ---------------------------------------------------------------------------


def check_compute_instance(rule: HardeningRule, attrs: Mapping[str, Any]) -> Violation | None:
    """Unencrypted volumes, automatic public IPs and token-optional IMDS."""
    intents = classify_intent(rule)

    if Intent.ENCRYPTION in intents:
        root = attrs.get("root_block_device")
        if is_truthy(root):
            root_block = first_mapping(root)
            if root_block is None or not is_truthy(root_block.get("encrypted")):
                return {"violation": "unencrypted_root_volume", "root_block_device": root}
        unencrypted = [
            dict(device) for device in mappings_in(attrs.get("ebs_block_device"))
            if not is_truthy(device.get("encrypted"))
        ]
        if unencrypted:
            return {"violation": "unencrypted_ebs_volumes", "unencrypted_devices": unencrypted}

    if Intent.PUBLIC_ACCESS in intents:
        if attrs.get("associate_public_ip_address") is True:
            return {"violation": "public_ip_assigned", "public_ip": True}

    if Intent.METADATA in intents:
        options = first_mapping(attrs.get("metadata_options"))
        if options is None or options.get("http_tokens") != "required":
            return {"violation": "imdsv1_enabled", "metadata_options": attrs.get("metadata_options")}

    return None


# ---------------------------------------------------------------------------
# Managed databases
# ---------------------------------------------------------------------------


def check_managed_database(rule: HardeningRule, attrs: Mapping[str, Any]) -> Violation | None:
    """Storage encryption, public accessibility, backup retention, deletion protection."""
    intents = classify_intent(rule)

    if Intent.ENCRYPTION in intents and not is_truthy(attrs.get("storage_encrypted")):
        return {"violation": "storage_not_encrypted", "storage_encrypted": False}

    if Intent.PUBLIC_ACCESS in intents and attrs.get("publicly_accessible") is True:
        return {"violation": "publicly_accessible", "publicly_accessible": True}

    if Intent.BACKUP in intents:
        retention = as_number(attrs.get("backup_retention_period"))
        if not retention or retention < MIN_BACKUP_RETENTION_DAYS:
            return {
                "violation": "insufficient_backup_retention",
                "backup_retention_period": attrs.get("backup_retention_period"),
            }

    if Intent.DELETION in intents and not is_truthy(attrs.get("deletion_protection")):
        return {"violation": "deletion_protection_disabled", "deletion_protection": False}

    return None


# ---------------------------------------------------------------------------
# Block volumes
# ---------------------------------------------------------------------------


def check_block_volume(rule: HardeningRule, attrs: Mapping[str, Any]) -> Violation | None:
    if Intent.ENCRYPTION in classify_intent(rule) and not is_truthy(attrs.get("encrypted")):
        return {"violation": "volume_not_encrypted", "encrypted": False}
    return None


# ---------------------------------------------------------------------------
# Generic fallback
# ---------------------------------------------------------------------------


def check_generic(rule: HardeningRule, attrs: Mapping[str, Any]) -> Violation | None:
    """Common encryption and public-access field names, for any other type.

    Only the rule's check text is consulted, not its id.
    """
    intents = classify_intent(rule, include_id=False)

    if Intent.ENCRYPTION in intents:
        has_encryption = any(
            attrs.get(name) is not None and attrs.get(name) is not False
            for name in _GENERIC_ENCRYPTION_FIELDS
        )
        if not has_encryption:
            return {
                "violation": "encryption_not_configured",
                "checked_fields": list(_GENERIC_ENCRYPTION_FIELDS),
            }

    if Intent.PUBLIC_ACCESS in intents:
        if any(attrs.get(name) is True for name in _GENERIC_PUBLIC_FIELDS):
            return {
                "violation": "public_access_enabled",
                "public_fields": list(_GENERIC_PUBLIC_FIELDS),
            }

    return None


# ---------------------------------------------------------------------------
# CheckerRegistry: resource type -> checker dispatch table
# ---------------------------------------------------------------------------


class CheckerRegistry:
    """Dispatch table from resource type to checker function.

    Lookups for unregistered types return the fallback checker.
    """

    def __init__(self, fallback: Checker = check_generic) -> None:
        self._checkers: dict[str, Checker] = {}
        self._fallback = fallback

    def register(self, checker: Checker, *resource_types: str) -> None:
        """Route each of ``resource_types`` to ``checker``, replacing any previous entry."""
        for resource_type in resource_types:
            self._checkers[resource_type] = checker

    def checker_for(self, resource_type: str) -> Checker:
        return self._checkers.get(resource_type, self._fallback)

    def check(
        self, resource_type: str, rule: HardeningRule, attrs: Mapping[str, Any]
    ) -> Violation | None:
        """Run the checker registered for ``resource_type``."""
        return self.checker_for(resource_type)(rule, attrs)

    @property
    def resource_types(self) -> list[str]:
        return sorted(self._checkers)


def default_checkers() -> CheckerRegistry:
    """Create a registry pre-loaded with the built-in AWS checkers."""
    registry = CheckerRegistry()
    registry.register(check_storage_bucket, "aws_s3_bucket")
    registry.register(check_network_rules, "aws_security_group", "aws_security_group_rule")
    registry.register(
        check_identity_policy,
        "aws_iam_policy", "aws_iam_role_policy", "aws_iam_user_policy",
    )
    registry.register(check_compute_instance, "aws_instance")
    registry.register(check_managed_database, "aws_db_instance")
    registry.register(check_block_volume, "aws_ebs_volume")
    return registry
