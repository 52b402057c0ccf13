"""
Pulumi components that turn a topology descriptor into AWS resources.

Each submodule provides resource factories and a domain component for one area:
- networking: VPC, subnets, gateways, route tables, security groups
- security: IAM roles and policy attachments
- compute: Lambda function and invoke permission
- edge: HTTP API, VPC Link, integration, route, stage
"""

from infra.components.base import DomainComponent
from infra.components.topology import (
    DOMAINS,
    FACTORIES,
    TopologyComponent,
    TopologyOutputs,
)

__all__ = [
    "DOMAINS",
    "DomainComponent",
    "FACTORIES",
    "TopologyComponent",
    "TopologyOutputs",
]
