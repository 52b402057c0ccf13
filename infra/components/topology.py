"""
Topology Component: renders a descriptor into Pulumi resources.

Walks the descriptor in topological order and creates one resource per
declaration, parented to the domain component that owns its kind
(VpcComponent, SecurityGroupsComponent, IamRolesComponent, LambdaComponent,
ApiGatewayComponent):
1. Ref handles become the referenced resource's output attribute, with the
   Ref template applied through Output.apply.
2. Explicit depends_on edges become ResourceOptions(depends_on=...);
   implicit edges need nothing more because the outputs carry them.
3. Errors from Pulumi or AWS are not caught here.
"""

from dataclasses import dataclass

import pulumi

from infra.components.base import DomainComponent, Factory
from infra.components.compute.lambda_function import LambdaComponent
from infra.components.edge.api_gateway import ApiGatewayComponent
from infra.components.networking.security_groups import SecurityGroupsComponent
from infra.components.networking.vpc import VpcComponent
from infra.components.security.iam_roles import IamRolesComponent
from infra.topology.builder import Topology
from infra.topology.model import Ref, ResourceDeclaration, ResourceKind, thaw

# Domain components in the order their resources are usually created
DOMAINS: tuple[type[DomainComponent], ...] = (
    VpcComponent,
    SecurityGroupsComponent,
    IamRolesComponent,
    LambdaComponent,
    ApiGatewayComponent,
)

DOMAIN_BY_KIND: dict[ResourceKind, type[DomainComponent]] = {
    kind: domain for domain in DOMAINS for kind in domain.FACTORIES
}

FACTORIES: dict[ResourceKind, Factory] = {
    kind: factory for domain in DOMAINS for kind, factory in domain.FACTORIES.items()
}


@dataclass
class TopologyOutputs:
    """Output values from the topology component."""
    private_subnet_cidr: pulumi.Output[str]
    public_subnet_cidr: pulumi.Output[str]
    lambda_function_arn: pulumi.Output[str]
    endpoint: pulumi.Output[str]


class TopologyComponent(pulumi.ComponentResource):
    """
    VPC, Lambda and HTTP API for the Info API, built from a descriptor.

    Resources keep their descriptor logical names, so two stacks built from
    the same configuration have identical URNs apart from the stack. Each
    resource is parented to the domain component for its kind, and domain
    components are created on first use under this component.
    """

    def __init__(
        self,
        name: str,
        topology: Topology,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:topology:InfoApi", name, None, opts)
        self.component_name = name
        self.topology = topology
        self.resources: dict[str, pulumi.CustomResource] = {}
        self.domains: dict[type[DomainComponent], DomainComponent] = {}

        for declaration in topology.graph.topological_order():
            self.resources[declaration.name] = self._create(declaration)

        for domain in self.domains.values():
            domain.finish()

        self._outputs = TopologyOutputs(
            **{key: self.resolve(ref) for key, ref in topology.outputs.items()}
        )

        self.register_outputs({
            "private_subnet_cidr": self._outputs.private_subnet_cidr,
            "public_subnet_cidr": self._outputs.public_subnet_cidr,
            "lambda_function_arn": self._outputs.lambda_function_arn,
            "endpoint": self._outputs.endpoint,
        })

    def domain(self, kind: ResourceKind) -> DomainComponent:
        """Get the domain component owning a kind, creating it on first use."""
        cls = DOMAIN_BY_KIND.get(kind)
        if cls is None:
            raise NotImplementedError(f"No factory for {kind.name}")

        if cls not in self.domains:
            self.domains[cls] = cls(
                f"{self.component_name}-{cls.SUFFIX}",
                opts=pulumi.ResourceOptions(parent=self),
            )
        return self.domains[cls]

    def _create(self, declaration: ResourceDeclaration) -> pulumi.CustomResource:
        """Create the Pulumi resource for one declaration."""
        domain = self.domain(declaration.kind)
        props = thaw(declaration.properties, self.resolve)
        depends_on = [
            self.resources[dependency]
            for dependency in self.topology.graph.explicit_dependencies_of(declaration.name)
        ]
        return domain.create(declaration, props, depends_on)

    def resolve(self, ref: Ref) -> pulumi.Output:
        """
        Resolve a Ref to the output attribute of an already-created resource.

        Args:
            ref: Reference from the descriptor

        Returns:
            The attribute output, formatted by the Ref template
        """
        output = getattr(self.resources[ref.resource], ref.attribute)
        if ref.template == "{}":
            return output
        return output.apply(ref.format)

    def get_outputs(self) -> TopologyOutputs:
        """Get topology output values."""
        return self._outputs
