"""
Networking resource factories.

Factories and components:
- vpc: VPC, subnets, internet/NAT gateways, route tables, associations
- security_groups: Security group with ingress rules
"""

from infra.components.networking.vpc import NETWORKING_FACTORIES, VpcComponent
from infra.components.networking.security_groups import (
    SECURITY_GROUP_FACTORIES,
    SecurityGroupsComponent,
)

__all__ = [
    "NETWORKING_FACTORIES",
    "SECURITY_GROUP_FACTORIES",
    "SecurityGroupsComponent",
    "VpcComponent",
]
