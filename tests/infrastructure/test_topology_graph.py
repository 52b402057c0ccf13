"""Tests for the topology model and graph."""

import pytest

from infra.core.exceptions import (
    DanglingReferenceError,
    DependencyCycleError,
    DuplicateResourceError,
)
from infra.topology.graph import TopologyGraph
from infra.topology.model import (
    EdgeKind,
    Ref,
    ResourceDeclaration,
    ResourceKind,
    thaw,
)


@pytest.fixture
def small_graph():
    """VPC -> subnet -> route table association, plus a standalone role."""
    graph = TopologyGraph()
    graph.add(ResourceDeclaration("vpc", ResourceKind.VPC, {"cidr_block": "10.0.0.0/16"}))
    graph.add(ResourceDeclaration("subnet", ResourceKind.SUBNET, {
        "vpc_id": Ref("vpc"),
        "cidr_block": "10.0.1.0/24",
    }))
    graph.add(ResourceDeclaration("role", ResourceKind.IAM_ROLE, {"assume_role_policy": "{}"}))
    graph.add(ResourceDeclaration("rt", ResourceKind.ROUTE_TABLE, {
        "vpc_id": Ref("vpc"),
        "routes": [],
    }))
    graph.add(ResourceDeclaration("assoc", ResourceKind.ROUTE_TABLE_ASSOCIATION, {
        "route_table_id": Ref("rt"),
        "subnet_id": Ref("subnet"),
    }))
    return graph


class TestRef:
    """Tests for Ref handles."""

    def test_defaults_to_id(self):
        ref = Ref("vpc")
        assert ref.attribute == "id"
        assert ref.format("vpc-123") == "vpc-123"

    def test_template_formats_resolved_value(self):
        ref = Ref("api", "execution_arn", "{}/*/*")
        assert ref.format("arn:aws:execute-api:x") == "arn:aws:execute-api:x/*/*"

    def test_str_shows_placeholder(self):
        assert str(Ref("integration", "id", "integrations/{}")) == "integrations/${integration.id}"


class TestResourceDeclaration:
    """Tests for ResourceDeclaration."""

    def test_properties_are_read_only(self):
        declaration = ResourceDeclaration("vpc", ResourceKind.VPC, {"cidr_block": "10.0.0.0/16"})

        with pytest.raises(TypeError):
            declaration.properties["cidr_block"] = "10.1.0.0/16"

    def test_nested_lists_are_frozen(self):
        declaration = ResourceDeclaration("sg", ResourceKind.SECURITY_GROUP, {
            "ingress": [{"from_port": 80, "cidr_blocks": ["0.0.0.0/0"]}],
        })

        ingress = declaration.get("ingress")
        assert isinstance(ingress, tuple)
        assert isinstance(ingress[0]["cidr_blocks"], tuple)

    def test_caller_dict_mutation_does_not_leak(self):
        properties = {"cidr_block": "10.0.0.0/16"}
        declaration = ResourceDeclaration("vpc", ResourceKind.VPC, properties)

        properties["cidr_block"] = "10.9.0.0/16"

        assert declaration.get("cidr_block") == "10.0.0.0/16"

    def test_references_are_found_in_nested_values(self):
        declaration = ResourceDeclaration("rt", ResourceKind.ROUTE_TABLE, {
            "vpc_id": Ref("vpc"),
            "routes": [{"cidr_block": "0.0.0.0/0", "gateway_id": Ref("igw")}],
        })

        assert declaration.references() == [Ref("vpc"), Ref("igw")]

    def test_thaw_replaces_refs(self):
        declaration = ResourceDeclaration("link", ResourceKind.VPC_LINK, {
            "subnet_ids": [Ref("subnet")],
        })

        props = thaw(declaration.properties, lambda ref: f"<{ref.resource}>")

        assert props == {"subnet_ids": ["<subnet>"]}

    def test_to_dict(self):
        declaration = ResourceDeclaration(
            "permission",
            ResourceKind.PERMISSION,
            {"function": Ref("fn", "name")},
            depends_on=("fn",),
        )

        assert declaration.to_dict() == {
            "name": "permission",
            "type": "aws:lambda/permission:Permission",
            "properties": {
                "function": {"$ref": "fn", "attribute": "name", "template": "{}"},
            },
            "depends_on": ["fn"],
        }


class TestTopologyGraph:
    """Tests for TopologyGraph."""

    def test_len_iter_contains(self, small_graph):
        assert len(small_graph) == 5
        assert "subnet" in small_graph
        assert "missing" not in small_graph
        assert [d.name for d in small_graph] == ["vpc", "subnet", "role", "rt", "assoc"]

    def test_duplicate_name_rejected(self, small_graph):
        with pytest.raises(DuplicateResourceError) as exc_info:
            small_graph.add(ResourceDeclaration("vpc", ResourceKind.VPC, {}))

        assert exc_info.value.name == "vpc"

    def test_dangling_reference_rejected(self):
        graph = TopologyGraph()

        with pytest.raises(DanglingReferenceError) as exc_info:
            graph.add(ResourceDeclaration("subnet", ResourceKind.SUBNET, {"vpc_id": Ref("vpc")}))

        assert exc_info.value.resource == "subnet"
        assert exc_info.value.reference == "vpc"
        assert "subnet" not in graph

    def test_dangling_depends_on_rejected(self):
        graph = TopologyGraph()

        with pytest.raises(DanglingReferenceError):
            graph.add(ResourceDeclaration("api", ResourceKind.API, {}, depends_on=("fn",)))

    def test_implicit_edges_from_refs(self, small_graph):
        edges = [e for e in small_graph.edges if e.source == "assoc"]

        assert {(e.target, e.kind) for e in edges} == {
            ("rt", EdgeKind.IMPLICIT),
            ("subnet", EdgeKind.IMPLICIT),
        }

    def test_explicit_edges_share_edge_structure(self, small_graph):
        small_graph.add(ResourceDeclaration(
            "fn",
            ResourceKind.FUNCTION,
            {"role": Ref("role", "arn")},
            depends_on=("subnet",),
        ))

        assert small_graph.dependencies_of("fn") == ["role", "subnet"]
        assert small_graph.explicit_dependencies_of("fn") == ["subnet"]

    def test_dependents_of(self, small_graph):
        assert small_graph.dependents_of("vpc") == ["subnet", "rt"]
        assert small_graph.dependents_of("assoc") == []

    def test_by_kind(self, small_graph):
        assert [d.name for d in small_graph.by_kind(ResourceKind.SUBNET)] == ["subnet"]

    def test_topological_order_respects_dependencies(self, small_graph):
        order = [d.name for d in small_graph.topological_order()]

        for edge in small_graph.edges:
            assert order.index(edge.target) < order.index(edge.source)

    def test_topological_order_is_declaration_order_when_possible(self, small_graph):
        assert [d.name for d in small_graph.topological_order()] == [
            "vpc", "subnet", "role", "rt", "assoc",
        ]

    def test_add_dependency_creates_explicit_edge(self, small_graph):
        edge = small_graph.add_dependency("rt", "role")

        assert edge.kind == EdgeKind.EXPLICIT
        assert "role" in small_graph.dependencies_of("rt")

    def test_add_dependency_rejects_cycle(self, small_graph):
        with pytest.raises(DependencyCycleError) as exc_info:
            small_graph.add_dependency("vpc", "assoc")

        assert exc_info.value.cycle[0] == "vpc"
        assert exc_info.value.cycle[-1] == "vpc"
        small_graph.validate()

    def test_add_dependency_rejects_self_edge(self, small_graph):
        with pytest.raises(DependencyCycleError):
            small_graph.add_dependency("vpc", "vpc")

    def test_add_dependency_rejects_unknown_names(self, small_graph):
        with pytest.raises(DanglingReferenceError):
            small_graph.add_dependency("vpc", "nope")

    def test_fingerprint_stable_for_equal_graphs(self, small_graph):
        other = TopologyGraph()
        for declaration in small_graph:
            other.add(declaration)

        assert other.fingerprint() == small_graph.fingerprint()

    def test_fingerprint_changes_with_properties(self, small_graph):
        other = TopologyGraph()
        other.add(ResourceDeclaration("vpc", ResourceKind.VPC, {"cidr_block": "10.1.0.0/16"}))

        assert other.fingerprint() != small_graph.fingerprint()
