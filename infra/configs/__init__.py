"""
Configuration module for Pulumi infrastructure.

Provides type-safe configuration loading from Pulumi stack config files.
"""

from infra.configs.base import IngressRule, TopologyConfig
from infra.configs.validation import validate_config
from infra.configs.environment import get_config
from infra.configs.constants import (
    VPC_CIDR,
    SUBNET_CIDRS,
    DEFAULT_TAGS,
    INGRESS_RULES,
)

__all__ = [
    "IngressRule",
    "TopologyConfig",
    "validate_config",
    "get_config",
    "VPC_CIDR",
    "SUBNET_CIDRS",
    "DEFAULT_TAGS",
    "INGRESS_RULES",
]
