"""Tests for the catalog-independent heuristic checks."""

from __future__ import annotations

import json

from statescope.core.analyzer.legacy import legacy_findings
from statescope.core.rules import Category, Severity
from statescope.core.state.models import Instance, Resource


def _resource(resource_type: str, *attributes: dict) -> Resource:
    return Resource(
        type=resource_type,
        name="r",
        instances=tuple(Instance(index=i, attributes=a) for i, a in enumerate(attributes)),
    )


class TestLegacyPublicExposure:
    """Tests for open security groups and public access blocks."""

    def test_security_group_rule_open_to_world(self) -> None:
        findings = legacy_findings(_resource(
            "aws_security_group_rule", {"cidr_blocks": ["0.0.0.0/0"], "from_port": 80},
        ))
        assert len(findings) == 1
        finding = findings[0]
        assert finding.id == "aws_security_group_rule.r[0]-public-access"
        assert finding.severity is Severity.HIGH
        assert finding.category is Category.PUBLIC_EXPOSURE
        assert finding.details == {"cidr_blocks": ["0.0.0.0/0"], "port": 80}

    def test_security_group_ssh_is_critical(self) -> None:
        findings = legacy_findings(_resource(
            "aws_security_group",
            {"ingress": [
                {"cidr_blocks": ["10.0.0.0/8"], "from_port": 22},
                {"cidr_blocks": ["0.0.0.0/0"], "from_port": 22},
                {"cidr_blocks": ["0.0.0.0/0"], "from_port": 8080},
            ]},
        ))
        assert [f.id for f in findings] == [
            "aws_security_group.r[0]-rule-1-public",
            "aws_security_group.r[0]-rule-2-public",
        ]
        assert findings[0].severity is Severity.CRITICAL
        assert "SSH" in findings[0].description
        assert findings[1].severity is Severity.HIGH
        assert "inbound" in findings[1].description

    def test_rdp_named_in_description(self) -> None:
        findings = legacy_findings(_resource(
            "aws_security_group", {"ingress": [{"cidr_blocks": ["0.0.0.0/0"], "from_port": 3389}]},
        ))
        assert "RDP" in findings[0].description

    def test_public_access_block_incomplete(self) -> None:
        findings = legacy_findings(_resource(
            "aws_s3_bucket_public_access_block",
            {"block_public_acls": True, "block_public_policy": False},
        ))
        assert [f.title for f in findings] == ["S3 Bucket Allows Public Access"]

    def test_public_access_block_complete(self) -> None:
        assert legacy_findings(_resource(
            "aws_s3_bucket_public_access_block",
            {"block_public_acls": True, "block_public_policy": True},
        )) == []


class TestLegacyEncryption:
    """Tests for unencrypted storage heuristics."""

    def test_ebs_volume(self) -> None:
        findings = legacy_findings(_resource("aws_ebs_volume", {"size": 10, "encrypted": False}))
        assert findings[0].id == "aws_ebs_volume.r[0]-encryption"
        assert findings[0].severity is Severity.MEDIUM

    def test_db_instance(self) -> None:
        findings = legacy_findings(_resource("aws_db_instance", {"engine": "postgres"}))
        assert findings[0].title == "RDS Instance Not Encrypted"
        assert findings[0].severity is Severity.HIGH

    def test_s3_bucket_without_sse(self) -> None:
        findings = legacy_findings(_resource("aws_s3_bucket", {"bucket": "b"}))
        assert findings[0].id == "aws_s3_bucket.r[0]-s3-encryption"

    def test_s3_bucket_with_sse(self, secure_bucket_attrs) -> None:
        assert legacy_findings(_resource("aws_s3_bucket", secure_bucket_attrs)) == []


class TestLegacyAccessControl:
    """Tests for default VPC and IAM heuristics."""

    def test_default_vpc(self) -> None:
        findings = legacy_findings(_resource("aws_default_vpc", {"cidr_block": "172.31.0.0/16"}))
        assert findings[0].severity is Severity.LOW
        assert findings[0].category is Category.ACCESS_CONTROL

    def test_iam_policy_with_wildcard_resource(self) -> None:
        policy = json.dumps({"Statement": [{"Effect": "Allow", "Action": "s3:*", "Resource": "*"}]})
        findings = legacy_findings(_resource("aws_iam_policy", {"name": "p", "policy": policy}))
        assert findings[0].id == "aws_iam_policy.r[0]-overly-permissive"
        assert findings[0].severity is Severity.MEDIUM

    def test_iam_policy_unreadable_is_skipped(self) -> None:
        assert legacy_findings(_resource("aws_iam_policy", {"policy": "{broken"})) == []

    def test_one_finding_set_per_instance(self) -> None:
        findings = legacy_findings(_resource("aws_default_vpc", {}, {}))
        assert [f.resource for f in findings] == ["aws_default_vpc.r[0]", "aws_default_vpc.r[1]"]
