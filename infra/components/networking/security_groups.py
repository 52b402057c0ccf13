"""
Security group factory for the API Gateway VPC Link.

Ingress rules come from configuration (default: HTTP/80 from anywhere).
Security groups are stateful: an allowed inbound request implicitly allows
its reply.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from infra.components.base import DomainComponent
from infra.topology.model import ResourceKind


def create_security_group(
    name: str,
    props: dict,
    opts: pulumi.ResourceOptions,
) -> aws.ec2.SecurityGroup:
    """Create a security group with inline ingress rules."""
    ingress = [aws.ec2.SecurityGroupIngressArgs(**rule) for rule in props.pop("ingress", [])]
    return aws.ec2.SecurityGroup(name, ingress=ingress, opts=opts, **props)


SECURITY_GROUP_FACTORIES = {
    ResourceKind.SECURITY_GROUP: create_security_group,
}


@dataclass
class SecurityGroupOutputs:
    """Output values from security groups component."""
    security_group_ids: dict[str, pulumi.Output[str]]


class SecurityGroupsComponent(DomainComponent):
    """Security groups guarding the VPC Link ENIs."""

    TYPE = "custom:networking:SecurityGroups"
    SUFFIX = "security-groups"
    FACTORIES = SECURITY_GROUP_FACTORIES

    def get_outputs(self) -> SecurityGroupOutputs:
        return SecurityGroupOutputs(
            security_group_ids=self.outputs_of(aws.ec2.SecurityGroup),
        )
