"""
Topology descriptor builder for the Info API.

Steps & Architecture:
1. Validate configuration: bad CIDRs, ports or names abort before any
   declaration exists.
2. Networking: VPC -> private/public subnets -> internet gateway -> Elastic IP
   -> NAT gateway (public subnet) -> route tables -> associations.
   - Private RT: 0.0.0.0/0 -> NAT gateway, associated with the private subnet.
   - Public RT: 0.0.0.0/0 -> internet gateway, made the VPC main table, so the
     public subnet picks it up implicitly.
3. Security group for the VPC Link, with the configured ingress rules.
4. Compute: IAM role -> basic execution policy attachment -> Lambda function.
5. Edge: HTTP API -> VPC Link -> invoke permission -> AWS_PROXY integration ->
   GET /info route -> auto-deploying stage named after the stack.

The builder is a pure function of its configuration: no engine calls, no
counters, no randomness. The same configuration always yields the same graph.
"""

import json
from dataclasses import dataclass

from infra.configs.base import TopologyConfig
from infra.configs.constants import (
    API_DEFAULTS,
    DEFAULT_ROUTE_CIDR,
    INVOKE_PERMISSION,
    LAMBDA_BASIC_EXECUTION_POLICY,
    RESOURCE_SUFFIXES,
)
from infra.configs.validation import validate_config
from infra.observability.logger import get_logger
from infra.topology.graph import TopologyGraph
from infra.topology.model import Ref, ResourceDeclaration, ResourceKind
from infra.utils.naming import ResourceNamer
from infra.utils.tags import create_tags

logger = get_logger(__name__)

LAMBDA_ASSUME_ROLE_POLICY = json.dumps({
    "Version": "2012-10-17",
    "Statement": [{
        "Sid": "AllowAssumeRole",
        "Effect": "Allow",
        "Principal": {"Service": "lambda.amazonaws.com"},
        "Action": "sts:AssumeRole",
    }],
})


@dataclass(frozen=True)
class Topology:
    """
    A built descriptor: the resource graph plus its named outputs.

    Outputs are Ref handles. They only gain values once the provisioning
    engine has created the referenced resources.
    """
    config: TopologyConfig
    graph: TopologyGraph
    names: dict[str, str]
    outputs: dict[str, Ref]

    def resource(self, role: str) -> ResourceDeclaration:
        """Get a declaration by role (e.g. 'nat_gateway')."""
        return self.graph.get(self.names[role])

    def route_table_for_subnet(self, subnet_name: str) -> ResourceDeclaration | None:
        """
        Resolve the route table that governs a subnet.

        An explicit association wins; otherwise the subnet falls back to the
        VPC main route table.
        """
        subnet = self.graph.get(subnet_name)
        if subnet is None:
            return None

        for association in self.graph.by_kind(ResourceKind.ROUTE_TABLE_ASSOCIATION):
            if association.get("subnet_id") == Ref(subnet_name):
                return self.graph.get(association.get("route_table_id").resource)

        vpc_ref = subnet.get("vpc_id")
        for association in self.graph.by_kind(ResourceKind.MAIN_ROUTE_TABLE_ASSOCIATION):
            if association.get("vpc_id") == vpc_ref:
                return self.graph.get(association.get("route_table_id").resource)
        return None

    def default_route_target(self, subnet_name: str) -> Ref | None:
        """The gateway a subnet's 0.0.0.0/0 route points at, if any."""
        table = self.route_table_for_subnet(subnet_name)
        if table is None:
            return None
        for route in table.get("routes", ()):
            if route.get("cidr_block") == DEFAULT_ROUTE_CIDR:
                return route.get("nat_gateway_id") or route.get("gateway_id")
        return None

    def to_dict(self) -> dict:
        """Return the descriptor as a JSON-compatible plan."""
        return {
            "stage": self.config.stage,
            **self.graph.to_dict(),
            "outputs": {key: ref.to_dict() for key, ref in self.outputs.items()},
        }


def build_topology(config: TopologyConfig) -> Topology:
    """
    Build the Info API resource graph.

    Args:
        config: Topology configuration constants

    Returns:
        Topology: Linked graph and deferred outputs

    Raises:
        ConfigurationError: If the configuration is malformed
        TopologyError: If the declarations do not form a valid graph
    """
    validate_config(config)

    namer = ResourceNamer(project=config.project)
    names = {role: namer.name(suffix) for role, suffix in RESOURCE_SUFFIXES.items()}
    tags = config.get_tags()
    graph = TopologyGraph()

    _declare_networking(graph, names, config, tags)
    _declare_security_group(graph, names, config, tags)
    _declare_compute(graph, names, config, tags)
    _declare_edge(graph, names, config, tags)

    graph.validate()

    outputs = {
        "private_subnet_cidr": Ref(names["private_subnet"], "cidr_block"),
        "public_subnet_cidr": Ref(names["public_subnet"], "cidr_block"),
        "lambda_function_arn": Ref(names["function"], "arn"),
        "endpoint": Ref(names["api"], "api_endpoint"),
    }

    logger.info(
        "Built topology for stage %s: %d resources, %d edges",
        config.stage,
        len(graph),
        len(graph.edges),
    )
    return Topology(config=config, graph=graph, names=names, outputs=outputs)


def _declare_networking(
    graph: TopologyGraph,
    names: dict[str, str],
    config: TopologyConfig,
    tags: dict[str, str],
) -> None:
    """Declare VPC, subnets, gateways, route tables and associations."""
    graph.add(ResourceDeclaration(names["vpc"], ResourceKind.VPC, {
        "cidr_block": config.vpc_cidr,
        "tags": create_tags(tags, names["vpc"]),
    }))

    vpc_id = Ref(names["vpc"])
    for role, cidr in (
        ("private_subnet", config.private_subnet_cidr),
        ("public_subnet", config.public_subnet_cidr),
    ):
        graph.add(ResourceDeclaration(names[role], ResourceKind.SUBNET, {
            "vpc_id": vpc_id,
            "cidr_block": cidr,
            "tags": create_tags(tags, names[role]),
        }))

    graph.add(ResourceDeclaration(names["igw"], ResourceKind.INTERNET_GATEWAY, {
        "vpc_id": vpc_id,
        "tags": create_tags(tags, names["igw"]),
    }))

    graph.add(ResourceDeclaration(names["nat_eip"], ResourceKind.ELASTIC_IP, {
        "domain": "vpc",
        "tags": create_tags(tags, names["nat_eip"]),
    }))

    # NAT lives in the public subnet so its egress goes through the IGW
    graph.add(ResourceDeclaration(names["nat_gateway"], ResourceKind.NAT_GATEWAY, {
        "subnet_id": Ref(names["public_subnet"]),
        "allocation_id": Ref(names["nat_eip"]),
        "tags": create_tags(tags, names["nat_gateway"]),
    }))

    graph.add(ResourceDeclaration(names["private_route_table"], ResourceKind.ROUTE_TABLE, {
        "vpc_id": vpc_id,
        "routes": [{
            "cidr_block": DEFAULT_ROUTE_CIDR,
            "nat_gateway_id": Ref(names["nat_gateway"]),
        }],
        "tags": create_tags(tags, names["private_route_table"]),
    }))

    graph.add(ResourceDeclaration(
        names["private_association"],
        ResourceKind.ROUTE_TABLE_ASSOCIATION,
        {
            "route_table_id": Ref(names["private_route_table"]),
            "subnet_id": Ref(names["private_subnet"]),
        },
    ))

    graph.add(ResourceDeclaration(names["public_route_table"], ResourceKind.ROUTE_TABLE, {
        "vpc_id": vpc_id,
        "routes": [{
            "cidr_block": DEFAULT_ROUTE_CIDR,
            "gateway_id": Ref(names["igw"]),
        }],
        "tags": create_tags(tags, names["public_route_table"]),
    }))

    graph.add(ResourceDeclaration(
        names["main_association"],
        ResourceKind.MAIN_ROUTE_TABLE_ASSOCIATION,
        {
            "route_table_id": Ref(names["public_route_table"]),
            "vpc_id": vpc_id,
        },
    ))


def _declare_security_group(
    graph: TopologyGraph,
    names: dict[str, str],
    config: TopologyConfig,
    tags: dict[str, str],
) -> None:
    graph.add(ResourceDeclaration(names["security_group"], ResourceKind.SECURITY_GROUP, {
        "vpc_id": Ref(names["vpc"]),
        "ingress": [rule.to_args() for rule in config.ingress_rules],
        "tags": create_tags(tags, names["security_group"]),
    }))


def _declare_compute(
    graph: TopologyGraph,
    names: dict[str, str],
    config: TopologyConfig,
    tags: dict[str, str],
) -> None:
    """Declare the execution role and the Lambda function."""
    graph.add(ResourceDeclaration(names["lambda_role"], ResourceKind.IAM_ROLE, {
        "assume_role_policy": LAMBDA_ASSUME_ROLE_POLICY,
        "tags": create_tags(tags, names["lambda_role"]),
    }))

    graph.add(ResourceDeclaration(
        names["lambda_role_attachment"],
        ResourceKind.ROLE_POLICY_ATTACHMENT,
        {
            "role": Ref(names["lambda_role"], "name"),
            "policy_arn": LAMBDA_BASIC_EXECUTION_POLICY,
        },
    ))

    graph.add(ResourceDeclaration(names["function"], ResourceKind.FUNCTION, {
        "role": Ref(names["lambda_role"], "arn"),
        "runtime": config.lambda_runtime,
        "code_path": config.code_path,
        "handler": config.lambda_handler,
        "tags": create_tags(tags, names["function"]),
    }))


def _declare_edge(
    graph: TopologyGraph,
    names: dict[str, str],
    config: TopologyConfig,
    tags: dict[str, str],
) -> None:
    """Declare the HTTP API and everything wiring it to the function."""
    graph.add(ResourceDeclaration(names["api"], ResourceKind.API, {
        "protocol_type": API_DEFAULTS["protocol_type"],
        "tags": create_tags(tags, names["api"]),
    }))

    graph.add(ResourceDeclaration(names["vpc_link"], ResourceKind.VPC_LINK, {
        "subnet_ids": [Ref(names["private_subnet"])],
        "security_group_ids": [Ref(names["security_group"])],
        "tags": create_tags(tags, names["vpc_link"]),
    }))

    # Wildcard covers every stage/method/path, wider than the single route
    graph.add(ResourceDeclaration(
        names["permission"],
        ResourceKind.PERMISSION,
        {
            "action": INVOKE_PERMISSION["action"],
            "principal": INVOKE_PERMISSION["principal"],
            "function": Ref(names["function"], "name"),
            "source_arn": Ref(
                names["api"],
                "execution_arn",
                INVOKE_PERMISSION["source_arn_template"],
            ),
        },
        depends_on=(names["api"], names["function"]),
    ))

    graph.add(ResourceDeclaration(names["integration"], ResourceKind.INTEGRATION, {
        "api_id": Ref(names["api"]),
        "integration_type": API_DEFAULTS["integration_type"],
        "integration_uri": Ref(names["function"], "arn"),
        "integration_method": API_DEFAULTS["integration_method"],
    }))

    graph.add(ResourceDeclaration(names["route"], ResourceKind.ROUTE, {
        "api_id": Ref(names["api"]),
        "route_key": config.route_key,
        "target": Ref(names["integration"], "id", "integrations/{}"),
    }))

    graph.add(ResourceDeclaration(names["stage"], ResourceKind.STAGE, {
        "api_id": Ref(names["api"]),
        "name": config.stage,
        "auto_deploy": True,
        "tags": create_tags(tags, names["stage"]),
    }))
