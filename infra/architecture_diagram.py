"""
Info API Architecture Diagram.

Draws the topology descriptor: one node per declaration, one arrow per
dependency edge (dependency -> dependent). Explicit depends_on hints are
dashed, attribute references are solid and labelled with the attribute.

Dependencies:
    pip install -e ".[diagram]"   (also needs Graphviz installed)

Usage:
    python -m infra.architecture_diagram [stage]
    # Outputs: info_api_architecture.png
"""

import sys

from diagrams import Cluster, Diagram, Edge
from diagrams.aws.compute import EC2ElasticIpAddress, Lambda
from diagrams.aws.general import General
from diagrams.aws.network import (
    VPC,
    APIGateway,
    APIGatewayEndpoint,
    InternetGateway,
    NATGateway,
    Nacl,
    PrivateSubnet,
    PublicSubnet,
    RouteTable,
    VPCElasticNetworkInterface,
)
from diagrams.aws.security import IAMPermissions, IAMRole

from infra.configs.base import TopologyConfig
from infra.topology.builder import Topology, build_topology
from infra.topology.model import EdgeKind, ResourceDeclaration, ResourceKind

# Custom styling
graph_attr = {
    "fontsize": "14",
    "bgcolor": "white",
    "pad": "0.5",
    "splines": "ortho",
    "nodesep": "0.8",
    "ranksep": "1.2",
}

node_attr = {
    "fontsize": "11",
}

edge_attr = {
    "fontsize": "9",
}

NODE_TYPES = {
    ResourceKind.VPC: VPC,
    ResourceKind.INTERNET_GATEWAY: InternetGateway,
    ResourceKind.ELASTIC_IP: EC2ElasticIpAddress,
    ResourceKind.NAT_GATEWAY: NATGateway,
    ResourceKind.ROUTE_TABLE: RouteTable,
    ResourceKind.ROUTE_TABLE_ASSOCIATION: RouteTable,
    ResourceKind.MAIN_ROUTE_TABLE_ASSOCIATION: RouteTable,
    ResourceKind.SECURITY_GROUP: Nacl,
    ResourceKind.IAM_ROLE: IAMRole,
    ResourceKind.ROLE_POLICY_ATTACHMENT: IAMPermissions,
    ResourceKind.FUNCTION: Lambda,
    ResourceKind.PERMISSION: IAMPermissions,
    ResourceKind.API: APIGateway,
    ResourceKind.VPC_LINK: VPCElasticNetworkInterface,
    ResourceKind.INTEGRATION: APIGatewayEndpoint,
    ResourceKind.ROUTE: APIGatewayEndpoint,
    ResourceKind.STAGE: APIGatewayEndpoint,
}

CLUSTERS = {
    ResourceKind.VPC: "VPC",
    ResourceKind.SUBNET: "VPC",
    ResourceKind.INTERNET_GATEWAY: "VPC",
    ResourceKind.ELASTIC_IP: "VPC",
    ResourceKind.NAT_GATEWAY: "VPC",
    ResourceKind.ROUTE_TABLE: "VPC",
    ResourceKind.ROUTE_TABLE_ASSOCIATION: "VPC",
    ResourceKind.MAIN_ROUTE_TABLE_ASSOCIATION: "VPC",
    ResourceKind.SECURITY_GROUP: "VPC",
    ResourceKind.IAM_ROLE: "IAM Security",
    ResourceKind.ROLE_POLICY_ATTACHMENT: "IAM Security",
    ResourceKind.FUNCTION: "Compute",
    ResourceKind.PERMISSION: "Compute",
    ResourceKind.API: "Edge Layer (API Gateway)",
    ResourceKind.VPC_LINK: "Edge Layer (API Gateway)",
    ResourceKind.INTEGRATION: "Edge Layer (API Gateway)",
    ResourceKind.ROUTE: "Edge Layer (API Gateway)",
    ResourceKind.STAGE: "Edge Layer (API Gateway)",
}


def node_type(declaration: ResourceDeclaration):
    """Pick the diagram node class for a declaration."""
    if declaration.kind == ResourceKind.SUBNET:
        # The public subnet is the one hosting a NAT gateway
        return PublicSubnet if "public" in declaration.name else PrivateSubnet
    return NODE_TYPES.get(declaration.kind, General)


def node_label(declaration: ResourceDeclaration) -> str:
    """Label a node with its name plus the most telling property."""
    detail = (
        declaration.get("cidr_block")
        or declaration.get("route_key")
        or declaration.get("handler")
        or declaration.get("protocol_type")
    )
    return f"{declaration.name}\n{detail}" if detail else declaration.name


def render_diagram(
    topology: Topology,
    filename: str = "info_api_architecture",
    show: bool = False,
) -> str:
    """
    Render the topology as a PNG.

    Args:
        topology: Built descriptor
        filename: Output file name without extension
        show: Open the image once rendered

    Returns:
        Path of the written image
    """
    nodes = {}
    with Diagram(
        f"Info API Architecture\n(stage: {topology.config.stage})",
        filename=filename,
        show=show,
        direction="TB",
        graph_attr=graph_attr,
        node_attr=node_attr,
        edge_attr=edge_attr,
    ):
        by_cluster: dict[str, list[ResourceDeclaration]] = {}
        for declaration in topology.graph:
            by_cluster.setdefault(CLUSTERS[declaration.kind], []).append(declaration)

        for label, declarations in by_cluster.items():
            with Cluster(label):
                for declaration in declarations:
                    nodes[declaration.name] = node_type(declaration)(node_label(declaration))

        for edge in topology.graph.edges:
            if edge.kind == EdgeKind.EXPLICIT:
                style = Edge(label="depends_on", color="gray", style="dashed")
            else:
                style = Edge(label=edge.attribute or "", color="darkblue")
            nodes[edge.target] >> style >> nodes[edge.source]

    return f"{filename}.png"


if __name__ == "__main__":
    stage = sys.argv[1] if len(sys.argv) > 1 else "dev"
    path = render_diagram(build_topology(TopologyConfig(stage=stage)))
    print(f"✅ Diagram generated: {path}")
