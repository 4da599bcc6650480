"""Fixed heuristic checks that run independently of the rule catalog.

These checks cover the most common risk patterns with hardcoded thresholds
and titles: internet-open security groups, unencrypted storage, databases
and volumes, default VPC usage and IAM policies granting ``Resource: "*"``.
They run for every resource even when the catalog has no matching rule.

Findings use the same shape as catalog findings, so the evaluator's
deduplication treats both sources uniformly.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from statescope.core.analyzer.checkers import (
    OPEN_CIDR,
    parse_policy_document,
    policy_statements,
)
from statescope.core.analyzer.models import SecurityFinding
from statescope.core.rules.models import Category, Severity
from statescope.core.state.attributes import contains_string, is_truthy, mappings_in
from statescope.core.state.models import Resource

logger = logging.getLogger(__name__)

_REMOTE_ACCESS_PORTS = {22: "SSH", 3389: "RDP"}


def legacy_findings(resource: Resource) -> list[SecurityFinding]:
    """Run every fixed heuristic against every instance of ``resource``."""
    findings: list[SecurityFinding] = []
    for instance_id, instance in resource.iter_instances():
        attrs = instance.attributes
        findings.extend(_public_exposure(instance_id, resource.type, attrs))
        findings.extend(_encryption(instance_id, resource.type, attrs))
        findings.extend(_access_control(instance_id, resource.type, attrs))
    return findings


def _public_exposure(
    instance_id: str, resource_type: str, attrs: Mapping[str, Any]
) -> list[SecurityFinding]:
    findings: list[SecurityFinding] = []

    if resource_type == "aws_security_group_rule":
        if contains_string(attrs.get("cidr_blocks"), OPEN_CIDR):
            findings.append(SecurityFinding(
                id=f"{instance_id}-public-access",
                severity=Severity.HIGH,
                category=Category.PUBLIC_EXPOSURE,
                title="Security Group Rule Allows Public Access",
                description=(
                    "Security group rule allows inbound traffic from anywhere (0.0.0.0/0)"
                ),
                resource=instance_id,
                remediation=(
                    "Restrict CIDR blocks to specific IP ranges or use security "
                    "group references"
                ),
                details={"cidr_blocks": attrs.get("cidr_blocks"), "port": attrs.get("from_port")},
            ))

    elif resource_type == "aws_security_group":
        ingress = attrs.get("ingress")
        entries = mappings_in(ingress if ingress is not None else attrs.get("egress"))
        for idx, entry in enumerate(entries):
            if not contains_string(entry.get("cidr_blocks"), OPEN_CIDR):
                continue
            port = entry.get("from_port")
            service = _REMOTE_ACCESS_PORTS.get(port) if isinstance(port, int) else None
            findings.append(SecurityFinding(
                id=f"{instance_id}-rule-{idx}-public",
                severity=Severity.CRITICAL if service else Severity.HIGH,
                category=Category.PUBLIC_EXPOSURE,
                title="Security Group Allows Public Access",
                description=(
                    f"Security group rule allows {service or 'inbound'} traffic from anywhere"
                ),
                resource=instance_id,
                remediation="Restrict CIDR blocks to specific IP ranges",
                details=dict(entry),
            ))

    elif resource_type == "aws_s3_bucket_public_access_block":
        if not is_truthy(attrs.get("block_public_acls")) or not is_truthy(
            attrs.get("block_public_policy")
        ):
            findings.append(SecurityFinding(
                id=f"{instance_id}-s3-public",
                severity=Severity.HIGH,
                category=Category.PUBLIC_EXPOSURE,
                title="S3 Bucket Allows Public Access",
                description="S3 bucket is not properly configured to block public access",
                resource=instance_id,
                remediation="Enable all public access block settings",
                details=dict(attrs),
            ))

    return findings


def _encryption(
    instance_id: str, resource_type: str, attrs: Mapping[str, Any]
) -> list[SecurityFinding]:
    if resource_type == "aws_ebs_volume" and not is_truthy(attrs.get("encrypted")):
        return [SecurityFinding(
            id=f"{instance_id}-encryption",
            severity=Severity.MEDIUM,
            category=Category.ENCRYPTION,
            title="EBS Volume Not Encrypted",
            description="EBS volume is not encrypted at rest",
            resource=instance_id,
            remediation="Enable encryption by setting encrypted = true",
            details={"size": attrs.get("size"), "type": attrs.get("type")},
        )]

    if resource_type == "aws_db_instance" and not is_truthy(attrs.get("storage_encrypted")):
        return [SecurityFinding(
            id=f"{instance_id}-db-encryption",
            severity=Severity.HIGH,
            category=Category.ENCRYPTION,
            title="RDS Instance Not Encrypted",
            description="RDS database instance is not encrypted at rest",
            resource=instance_id,
            remediation="Enable storage encryption by setting storage_encrypted = true",
            details={"engine": attrs.get("engine"), "instance_class": attrs.get("instance_class")},
        )]

    if resource_type == "aws_s3_bucket" and not is_truthy(
        attrs.get("server_side_encryption_configuration")
    ):
        return [SecurityFinding(
            id=f"{instance_id}-s3-encryption",
            severity=Severity.MEDIUM,
            category=Category.ENCRYPTION,
            title="S3 Bucket Not Encrypted",
            description="S3 bucket does not have server-side encryption configured",
            resource=instance_id,
            remediation=(
                "Configure server-side encryption with "
                "aws_s3_bucket_server_side_encryption_configuration"
            ),
            details={"bucket": attrs.get("bucket")},
        )]

    return []


def _access_control(
    instance_id: str, resource_type: str, attrs: Mapping[str, Any]
) -> list[SecurityFinding]:
    if resource_type == "aws_default_vpc":
        return [SecurityFinding(
            id=f"{instance_id}-default-vpc",
            severity=Severity.LOW,
            category=Category.ACCESS_CONTROL,
            title="Using Default VPC",
            description=(
                "Resource is using the default VPC which may not follow security "
                "best practices"
            ),
            resource=instance_id,
            remediation="Create a custom VPC with proper network segmentation",
            details={"cidr_block": attrs.get("cidr_block")},
        )]

    if resource_type == "aws_iam_policy" and is_truthy(attrs.get("policy")):
        try:
            policy = parse_policy_document(attrs.get("policy"))
        except ValueError:
            logger.debug("Unreadable policy on %s; skipped by legacy checks", instance_id)
            return []
        if policy is None:
            return []
        if any(
            stmt.get("Effect") == "Allow" and stmt.get("Resource") == "*"
            for stmt in policy_statements(policy)
        ):
            return [SecurityFinding(
                id=f"{instance_id}-overly-permissive",
                severity=Severity.MEDIUM,
                category=Category.ACCESS_CONTROL,
                title="Overly Permissive IAM Policy",
                description="IAM policy grants access to all resources (*)",
                resource=instance_id,
                remediation=(
                    "Restrict policy to specific resources and follow principle of "
                    "least privilege"
                ),
                details={"policy_name": attrs.get("name")},
            )]

    return []
