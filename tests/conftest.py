"""Shared fixtures for statescope tests.

State documents are built as plain dicts, exactly as they appear in a
``.tfstate`` file, and either parsed in memory or written to ``tmp_path``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest


def resource_entry(
    resource_type: str,
    name: str,
    *attributes: dict[str, Any],
    depends_on: list[str] | None = None,
    provider: str = 'provider["registry.terraform.io/hashicorp/aws"]',
) -> dict[str, Any]:
    """Build one raw resource entry with an instance per attribute mapping."""
    instances = []
    for attrs in attributes or ({},):
        instance: dict[str, Any] = {"schema_version": 0, "attributes": attrs}
        if depends_on:
            instance["depends_on"] = list(depends_on)
        instances.append(instance)
    return {
        "mode": "managed",
        "type": resource_type,
        "name": name,
        "provider": provider,
        "instances": instances,
    }


def state_dict(*resources: dict[str, Any]) -> dict[str, Any]:
    """Wrap raw resource entries in a version 4 state document."""
    return {
        "version": 4,
        "terraform_version": "1.6.2",
        "serial": 7,
        "lineage": "3f1e2c0a-lineage",
        "outputs": {},
        "resources": list(resources),
    }


@pytest.fixture
def public_sg_state() -> dict[str, Any]:
    """A security group admitting SSH from 0.0.0.0/0."""
    return state_dict(
        resource_entry(
            "aws_security_group", "web",
            {
                "name": "web",
                "ingress": [
                    {
                        "from_port": 22,
                        "to_port": 22,
                        "protocol": "tcp",
                        "cidr_blocks": ["0.0.0.0/0"],
                    },
                ],
            },
        ),
    )


@pytest.fixture
def secure_bucket_attrs() -> dict[str, Any]:
    """Attributes of an S3 bucket that satisfies every bucket rule."""
    return {
        "bucket": "audit-logs",
        "acl": "private",
        "server_side_encryption_configuration": [
            {"rule": [{"apply_server_side_encryption_by_default": [{"sse_algorithm": "aws:kms"}]}]},
        ],
        "versioning": [{"enabled": True, "mfa_delete": False}],
        "logging": [{"target_bucket": "central-logs", "target_prefix": "audit/"}],
        "region": "us-east-1",
    }


@pytest.fixture
def mixed_state() -> dict[str, Any]:
    """A small network: VPC, subnet, instance and an open security group."""
    return state_dict(
        resource_entry(
            "aws_vpc", "main",
            {"id": "vpc-1", "cidr_block": "10.0.0.0/16", "region": "us-east-1"},
        ),
        resource_entry(
            "aws_subnet", "public",
            {"id": "subnet-1", "vpc_id": "${aws_vpc.main.id}", "availability_zone": "us-east-1a"},
        ),
        resource_entry(
            "aws_security_group", "web",
            {
                "vpc_id": "${aws_vpc.main.id}",
                "ingress": [
                    {"from_port": 443, "to_port": 443, "protocol": "tcp", "cidr_blocks": ["0.0.0.0/0"]},
                ],
            },
        ),
        resource_entry(
            "aws_instance", "app",
            {
                "subnet_id": "${aws_subnet.public.id}",
                "associate_public_ip_address": False,
                "root_block_device": [{"encrypted": True, "volume_size": 20}],
                "metadata_options": [{"http_tokens": "required"}],
                "availability_zone": "eu-west-1b",
            },
            depends_on=["aws_security_group.web"],
        ),
    )


@pytest.fixture
def write_state(tmp_path: Path) -> Callable[..., Path]:
    """Return a helper that writes a state dict to ``tmp_path``."""

    def _write(state: Any, name: str = "terraform.tfstate") -> Path:
        path = tmp_path / name
        if isinstance(state, str):
            path.write_text(state, encoding="utf-8")
        else:
            path.write_text(json.dumps(state), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_resource() -> Callable[..., dict[str, Any]]:
    """Expose ``resource_entry`` to tests."""
    return resource_entry


@pytest.fixture
def make_state() -> Callable[..., dict[str, Any]]:
    """Expose ``state_dict`` to tests."""
    return state_dict
