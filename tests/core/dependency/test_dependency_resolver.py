"""Tests for the DependencyResolver.

Verifies:
    - Explicit edges from depends_on, targets kept verbatim.
    - Implicit edges from ${type.name} references, only to known resources.
    - No implicit self-edges.
    - Relationship labels (attribute path, default label at the root).
    - Explicit edges are listed before implicit ones; no deduplication.
"""

from __future__ import annotations

import pytest

from statescope.config import AnalysisSettings
from statescope.core.dependency import DependencyEdge, DependencyResolver, EdgeKind
from statescope.core.state import parse_state
from statescope.core.state.models import Instance, Resource
from statescope.exceptions import AnalysisError


def _resolve(state: dict) -> list[DependencyEdge]:
    return DependencyResolver().resolve(parse_state(state).resources)


class TestExplicitDependencies:
    """Tests for depends_on edges."""

    def test_explicit_dependency(self, make_state, make_resource) -> None:
        edges = _resolve(make_state(
            make_resource("aws_vpc", "main", {}),
            make_resource("aws_instance", "app", {}, depends_on=["aws_vpc.main"]),
        ))
        assert edges == [
            DependencyEdge("aws_instance.app", "aws_vpc.main", EdgeKind.EXPLICIT, "depends_on"),
        ]

    def test_explicit_target_kept_verbatim(self, make_state, make_resource) -> None:
        edges = _resolve(make_state(
            make_resource("aws_instance", "app", {}, depends_on=["module.net.aws_vpc.this"]),
        ))
        assert [e.target for e in edges] == ["module.net.aws_vpc.this"]

    def test_one_edge_per_instance(self, make_state, make_resource) -> None:
        edges = _resolve(make_state(
            make_resource("aws_instance", "app", {}, {}, depends_on=["aws_vpc.main"]),
        ))
        assert len(edges) == 2


class TestImplicitDependencies:
    """Tests for reference-derived edges."""

    def test_reference_to_present_resource(self, make_state, make_resource) -> None:
        edges = _resolve(make_state(
            make_resource("aws_vpc", "main", {"id": "vpc-1"}),
            make_resource("aws_subnet", "a", {"vpc_id": "${aws_vpc.main.id}"}),
        ))
        assert edges == [
            DependencyEdge("aws_subnet.a", "aws_vpc.main", EdgeKind.IMPLICIT, "vpc_id"),
        ]

    def test_reference_to_absent_resource(self, make_state, make_resource) -> None:
        edges = _resolve(make_state(
            make_resource("aws_subnet", "a", {"vpc_id": "${aws_vpc.missing.id}"}),
        ))
        assert edges == []

    def test_self_reference_is_ignored(self, make_state, make_resource) -> None:
        edges = _resolve(make_state(
            make_resource("aws_security_group", "web", {"name": "${aws_security_group.web.id}"}),
        ))
        assert edges == []

    def test_nested_paths(self, make_state, make_resource) -> None:
        edges = _resolve(make_state(
            make_resource("aws_security_group", "db", {}),
            make_resource(
                "aws_security_group", "app",
                {"ingress": [{"security_groups": ["${aws_security_group.db.id}"]}]},
            ),
        ))
        assert [e.relationship for e in edges] == ["ingress[0].security_groups[0]"]

    def test_multiple_references_in_one_string(self, make_state, make_resource) -> None:
        edges = _resolve(make_state(
            make_resource("aws_s3_bucket", "logs", {}),
            make_resource("aws_kms_key", "k", {}),
            make_resource(
                "aws_iam_policy", "p",
                {"policy": "${aws_s3_bucket.logs.arn} ${aws_kms_key.k.arn}"},
            ),
        ))
        assert [e.target for e in edges] == ["aws_s3_bucket.logs", "aws_kms_key.k"]

    def test_root_leaf_gets_default_relationship(self) -> None:
        resource = Resource(
            type="aws_subnet", name="a",
            instances=(Instance(index=0, attributes={"": "${aws_vpc.main.id}"}),),
        )
        vpc = Resource(type="aws_vpc", name="main", instances=(Instance(index=0),))
        edges = DependencyResolver().resolve([vpc, resource])
        assert edges[0].relationship == "attribute_reference"

    def test_plain_ids_are_not_references(self, make_state, make_resource) -> None:
        edges = _resolve(make_state(
            make_resource("aws_vpc", "main", {"id": "vpc-1"}),
            make_resource("aws_subnet", "a", {"vpc_id": "vpc-1", "count": 3, "enabled": True}),
        ))
        assert edges == []


class TestResolverOrdering:
    """Tests for output order and settings."""

    def test_explicit_before_implicit_without_dedup(self, make_state, make_resource) -> None:
        edges = _resolve(make_state(
            make_resource("aws_subnet", "a", {"vpc_id": "${aws_vpc.main.id}"}),
            make_resource("aws_vpc", "main", {}),
            make_resource(
                "aws_instance", "app",
                {"vpc": "${aws_vpc.main.id}"},
                depends_on=["aws_vpc.main"],
            ),
        ))
        assert [(e.source, e.kind) for e in edges] == [
            ("aws_instance.app", EdgeKind.EXPLICIT),
            ("aws_subnet.a", EdgeKind.IMPLICIT),
            ("aws_instance.app", EdgeKind.IMPLICIT),
        ]

    def test_depth_cap(self, make_state, make_resource) -> None:
        deep: dict = {"ref": "${aws_vpc.main.id}"}
        for _ in range(5):
            deep = {"inner": deep}
        state = make_state(
            make_resource("aws_vpc", "main", {}),
            make_resource("aws_subnet", "a", deep),
        )
        resources = parse_state(state).resources
        assert DependencyResolver(AnalysisSettings(max_attribute_depth=3)).resolve(resources) == []
        assert len(DependencyResolver().resolve(resources)) == 1

    @pytest.mark.parametrize("bad", [None, "aws_vpc.main", 7])
    def test_non_sequence_input(self, bad) -> None:
        with pytest.raises(AnalysisError):
            DependencyResolver().resolve(bad)

    def test_edge_to_dict(self) -> None:
        edge = DependencyEdge("a.b", "c.d", EdgeKind.IMPLICIT, "x.y")
        assert edge.to_dict() == {
            "source": "a.b", "target": "c.d", "type": "implicit", "relationship": "x.y",
        }
