"""
Shared base for the domain components.

A domain component owns the resources of one area (networking, IAM, compute,
edge) as Pulumi children, the way each component in this package groups its
resources. The topology component decides creation order; a domain component
only creates what it is handed and reports its outputs at the end.
"""

from dataclasses import fields
from typing import Any, Callable, ClassVar

import pulumi

from infra.topology.model import ResourceDeclaration, ResourceKind

Factory = Callable[[str, dict, pulumi.ResourceOptions], pulumi.CustomResource]


class DomainComponent(pulumi.ComponentResource):
    """
    Parent for the resources of one domain.

    Subclasses set TYPE (the component type token), SUFFIX (appended to the
    parent's name) and FACTORIES, and build their outputs dataclass in
    get_outputs().
    """

    TYPE: ClassVar[str]
    SUFFIX: ClassVar[str]
    FACTORIES: ClassVar[dict[ResourceKind, Factory]]

    def __init__(self, name: str, opts: pulumi.ResourceOptions | None = None) -> None:
        super().__init__(self.TYPE, name, None, opts)
        self.resources: dict[str, pulumi.CustomResource] = {}

    def create(
        self,
        declaration: ResourceDeclaration,
        props: dict,
        depends_on: list[pulumi.Resource],
    ) -> pulumi.CustomResource:
        """
        Create one declared resource as a child of this component.

        Args:
            declaration: Declaration being rendered
            props: Resolved keyword arguments for the resource
            depends_on: Resources from explicit depends_on edges

        Returns:
            The created Pulumi resource
        """
        factory = self.FACTORIES[declaration.kind]
        opts = pulumi.ResourceOptions(parent=self, depends_on=depends_on)

        pulumi.log.debug(f"Creating {declaration.kind.name} {declaration.name}", self)
        resource = factory(declaration.name, props, opts)
        self.resources[declaration.name] = resource
        return resource

    def outputs_of(self, cls: type, attribute: str = "id") -> dict[str, pulumi.Output]:
        """An attribute of every child of a Pulumi class, keyed by logical name."""
        return {
            name: getattr(resource, attribute)
            for name, resource in self.resources.items()
            if isinstance(resource, cls)
        }

    def get_outputs(self) -> Any:
        raise NotImplementedError

    def finish(self) -> None:
        """Register the outputs once every child has been created."""
        outputs = self.get_outputs()
        self.register_outputs({f.name: getattr(outputs, f.name) for f in fields(outputs)})
