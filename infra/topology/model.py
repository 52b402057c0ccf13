"""
Resource declarations and dependency edges for the topology descriptor.

A declaration is an immutable, tagged record: a logical name, a resource
kind and a property mapping. Properties may hold Ref handles pointing at
attributes of other declarations; those handles are the deferred values the
provisioning engine resolves after creating the referenced resource.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterator, Mapping


class ResourceKind(str, Enum):
    """Resource kinds, valued by their Pulumi type token."""

    VPC = "aws:ec2/vpc:Vpc"
    SUBNET = "aws:ec2/subnet:Subnet"
    INTERNET_GATEWAY = "aws:ec2/internetGateway:InternetGateway"
    ELASTIC_IP = "aws:ec2/eip:Eip"
    NAT_GATEWAY = "aws:ec2/natGateway:NatGateway"
    ROUTE_TABLE = "aws:ec2/routeTable:RouteTable"
    ROUTE_TABLE_ASSOCIATION = "aws:ec2/routeTableAssociation:RouteTableAssociation"
    MAIN_ROUTE_TABLE_ASSOCIATION = (
        "aws:ec2/mainRouteTableAssociation:MainRouteTableAssociation"
    )
    SECURITY_GROUP = "aws:ec2/securityGroup:SecurityGroup"
    IAM_ROLE = "aws:iam/role:Role"
    ROLE_POLICY_ATTACHMENT = "aws:iam/rolePolicyAttachment:RolePolicyAttachment"
    FUNCTION = "aws:lambda/function:Function"
    PERMISSION = "aws:lambda/permission:Permission"
    API = "aws:apigatewayv2/api:Api"
    VPC_LINK = "aws:apigatewayv2/vpcLink:VpcLink"
    INTEGRATION = "aws:apigatewayv2/integration:Integration"
    ROUTE = "aws:apigatewayv2/route:Route"
    STAGE = "aws:apigatewayv2/stage:Stage"


class EdgeKind(str, Enum):
    """How a dependency edge was declared."""

    IMPLICIT = "implicit"  # attribute reference in a property
    EXPLICIT = "explicit"  # depends_on hint


@dataclass(frozen=True)
class Ref:
    """
    Deferred reference to an attribute of another declaration.

    Attributes:
        resource: Logical name of the referenced declaration
        attribute: Output attribute to read once provisioned (e.g. 'arn')
        template: str.format template applied to the resolved value
    """
    resource: str
    attribute: str = "id"
    template: str = "{}"

    def format(self, value: Any) -> str:
        """Apply the template to a resolved value."""
        return self.template.format(value)

    def to_dict(self) -> dict[str, str]:
        return {
            "$ref": self.resource,
            "attribute": self.attribute,
            "template": self.template,
        }

    def __str__(self) -> str:
        return self.template.format(f"${{{self.resource}.{self.attribute}}}")


def _freeze(value: Any) -> Any:
    """Recursively convert lists and dicts to read-only equivalents."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


def thaw(value: Any, ref_handler=None) -> Any:
    """
    Convert frozen properties back to plain dicts and lists.

    Args:
        value: Frozen property value
        ref_handler: Called with each Ref; its result replaces the Ref.
            Refs are kept as-is when omitted.

    Returns:
        Mutable copy of the value
    """
    if isinstance(value, Ref):
        return ref_handler(value) if ref_handler else value
    if isinstance(value, Mapping):
        return {key: thaw(item, ref_handler) for key, item in value.items()}
    if isinstance(value, tuple):
        return [thaw(item, ref_handler) for item in value]
    return value


def iter_refs(value: Any) -> Iterator[Ref]:
    """Yield every Ref nested in a property value, depth first."""
    if isinstance(value, Ref):
        yield value
    elif isinstance(value, Mapping):
        for item in value.values():
            yield from iter_refs(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from iter_refs(item)


@dataclass(frozen=True)
class ResourceDeclaration:
    """
    A single resource in the topology.

    Properties are frozen on construction; changing a resource means
    declaring a new topology and letting the engine reconcile it.
    """
    name: str
    kind: ResourceKind
    properties: Mapping[str, Any] = field(default_factory=dict)
    depends_on: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "properties", _freeze(self.properties))
        object.__setattr__(self, "depends_on", tuple(self.depends_on))

    def references(self) -> list[Ref]:
        """All attribute references held in the properties."""
        return list(iter_refs(self.properties))

    def get(self, key: str, default: Any = None) -> Any:
        return self.properties.get(key, default)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-compatible representation."""
        return {
            "name": self.name,
            "type": self.kind.value,
            "properties": thaw(self.properties, lambda ref: ref.to_dict()),
            "depends_on": list(self.depends_on),
        }

    def __repr__(self) -> str:
        return f"ResourceDeclaration({self.name}, {self.kind.name})"


@dataclass(frozen=True)
class Edge:
    """
    Directed dependency edge: `source` must be created after `target`.

    Attributes:
        source: Dependent resource
        target: Dependency
        kind: Whether the edge came from a reference or a depends_on hint
        attribute: Referenced attribute for implicit edges
    """
    source: str
    target: str
    kind: EdgeKind
    attribute: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.source,
            "to": self.target,
            "kind": self.kind.value,
            "attribute": self.attribute,
        }
