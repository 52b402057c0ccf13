"""
VPC resource factories.

Architecture:
1. VPC (10.0.0.0/16): the isolated network container.
2. Subnets:
   - Private (10.0.1.0/24): VPC Link ENIs, no public IPs.
   - Public (10.0.2.0/24): hosts the NAT gateway.
3. Internet Gateway: the "door" to the internet for the public subnet.
4. Elastic IP + NAT Gateway: outbound-only internet for the private subnet.
5. Route Tables:
   - Private RT: 0.0.0.0/0 -> NAT gateway, explicitly associated.
   - Public RT: 0.0.0.0/0 -> IGW, set as the VPC main route table so any
     subnet without an explicit association (the public one) uses it.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from infra.components.base import DomainComponent
from infra.topology.model import ResourceKind


def create_vpc(name: str, props: dict, opts: pulumi.ResourceOptions) -> aws.ec2.Vpc:
    return aws.ec2.Vpc(name, opts=opts, **props)


def create_subnet(name: str, props: dict, opts: pulumi.ResourceOptions) -> aws.ec2.Subnet:
    return aws.ec2.Subnet(name, opts=opts, **props)


def create_internet_gateway(
    name: str,
    props: dict,
    opts: pulumi.ResourceOptions,
) -> aws.ec2.InternetGateway:
    return aws.ec2.InternetGateway(name, opts=opts, **props)


def create_elastic_ip(name: str, props: dict, opts: pulumi.ResourceOptions) -> aws.ec2.Eip:
    return aws.ec2.Eip(name, opts=opts, **props)


def create_nat_gateway(
    name: str,
    props: dict,
    opts: pulumi.ResourceOptions,
) -> aws.ec2.NatGateway:
    return aws.ec2.NatGateway(name, opts=opts, **props)


def create_route_table(
    name: str,
    props: dict,
    opts: pulumi.ResourceOptions,
) -> aws.ec2.RouteTable:
    """Create a route table, typing each route block."""
    routes = [aws.ec2.RouteTableRouteArgs(**route) for route in props.pop("routes", [])]
    return aws.ec2.RouteTable(name, routes=routes, opts=opts, **props)


def create_route_table_association(
    name: str,
    props: dict,
    opts: pulumi.ResourceOptions,
) -> aws.ec2.RouteTableAssociation:
    return aws.ec2.RouteTableAssociation(name, opts=opts, **props)


def create_main_route_table_association(
    name: str,
    props: dict,
    opts: pulumi.ResourceOptions,
) -> aws.ec2.MainRouteTableAssociation:
    return aws.ec2.MainRouteTableAssociation(name, opts=opts, **props)


NETWORKING_FACTORIES = {
    ResourceKind.VPC: create_vpc,
    ResourceKind.SUBNET: create_subnet,
    ResourceKind.INTERNET_GATEWAY: create_internet_gateway,
    ResourceKind.ELASTIC_IP: create_elastic_ip,
    ResourceKind.NAT_GATEWAY: create_nat_gateway,
    ResourceKind.ROUTE_TABLE: create_route_table,
    ResourceKind.ROUTE_TABLE_ASSOCIATION: create_route_table_association,
    ResourceKind.MAIN_ROUTE_TABLE_ASSOCIATION: create_main_route_table_association,
}


@dataclass
class VpcOutputs:
    """Output values from VPC component."""
    vpc_ids: dict[str, pulumi.Output[str]]
    subnet_ids: dict[str, pulumi.Output[str]]
    nat_gateway_ids: dict[str, pulumi.Output[str]]
    route_table_ids: dict[str, pulumi.Output[str]]


class VpcComponent(DomainComponent):
    """VPC with private/public subnets, NAT egress and internet-facing routing."""

    TYPE = "custom:networking:Vpc"
    SUFFIX = "network"
    FACTORIES = NETWORKING_FACTORIES

    def get_outputs(self) -> VpcOutputs:
        """Get VPC output values."""
        return VpcOutputs(
            vpc_ids=self.outputs_of(aws.ec2.Vpc),
            subnet_ids=self.outputs_of(aws.ec2.Subnet),
            nat_gateway_ids=self.outputs_of(aws.ec2.NatGateway),
            route_table_ids=self.outputs_of(aws.ec2.RouteTable),
        )
