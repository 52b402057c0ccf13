"""
Base configuration dataclasses for the topology.

Provides type-safe configuration structure loaded from Pulumi stack configs.
"""

from dataclasses import dataclass, field

from infra.configs.constants import (
    API_DEFAULTS,
    DEFAULT_TAGS,
    INGRESS_RULES,
    LAMBDA_DEFAULTS,
    PROJECT_NAME,
    RESOURCE_SUFFIXES,
    SUBNET_CIDRS,
    VPC_CIDR,
)
from infra.core.exceptions import ConfigurationError


@dataclass(frozen=True)
class IngressRule:
    """
    Inbound security group rule.

    Attributes:
        from_port: First port of the range
        to_port: Last port of the range
        protocol: IP protocol name or "-1" for all
        cidr_blocks: Source CIDR blocks
        description: Free-text rule description
    """
    from_port: int
    to_port: int
    protocol: str
    cidr_blocks: tuple[str, ...]
    description: str = ""

    @classmethod
    def from_dict(
        cls,
        data: dict,
        resource: str = RESOURCE_SUFFIXES["security_group"],
        field: str = "ingress",
    ) -> "IngressRule":
        """
        Build a rule from a stack config object.

        Args:
            data: Rule object with from_port, to_port, protocol, cidr_blocks
            resource: Security group name reported on failure
            field: Field name reported on failure, e.g. 'ingress[0]'

        Raises:
            ConfigurationError: If the rule is not an object or lacks a key
        """
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Ingress rule must be an object, got {data!r}",
                resource=resource,
                field=field,
            )
        missing = [key for key in ("from_port", "to_port", "protocol") if key not in data]
        if missing:
            raise ConfigurationError(
                f"Ingress rule is missing {', '.join(missing)}",
                resource=resource,
                field=field,
            )
        cidr_blocks = data.get("cidr_blocks", [])
        if not isinstance(cidr_blocks, (list, tuple)):
            raise ConfigurationError(
                f"cidr_blocks must be a list of CIDR blocks, got {cidr_blocks!r}",
                resource=resource,
                field=f"{field}.cidr_blocks",
            )
        return cls(
            from_port=data["from_port"],
            to_port=data["to_port"],
            protocol=data["protocol"],
            cidr_blocks=tuple(cidr_blocks),
            description=data.get("description", ""),
        )

    def to_args(self) -> dict:
        """Return the rule as keyword arguments for an EC2 ingress block."""
        return {
            "description": self.description,
            "from_port": self.from_port,
            "to_port": self.to_port,
            "protocol": self.protocol,
            "cidr_blocks": list(self.cidr_blocks),
        }


def _default_ingress_rules() -> tuple[IngressRule, ...]:
    return tuple(IngressRule.from_dict(rule) for rule in INGRESS_RULES)


@dataclass(frozen=True)
class TopologyConfig:
    """
    Configuration constants for the Info API topology.

    Attributes:
        stage: Deployment stage name, normally the Pulumi stack name
        project: Prefix for logical resource names
        vpc_cidr: CIDR block of the VPC
        private_subnet_cidr: CIDR block of the private subnet
        public_subnet_cidr: CIDR block of the public subnet
        ingress_rules: Security group ingress rules for the VPC Link
        lambda_runtime: Lambda runtime identifier
        lambda_handler: Handler entry point (module.function)
        code_path: Path of the zipped handler bundle
        route_key: API Gateway route key (METHOD /path)
        tags: Tags applied to every taggable resource
    """
    stage: str
    project: str = PROJECT_NAME
    vpc_cidr: str = VPC_CIDR
    private_subnet_cidr: str = SUBNET_CIDRS["private"]
    public_subnet_cidr: str = SUBNET_CIDRS["public"]
    ingress_rules: tuple[IngressRule, ...] = field(default_factory=_default_ingress_rules)
    lambda_runtime: str = LAMBDA_DEFAULTS["runtime"]
    lambda_handler: str = LAMBDA_DEFAULTS["handler"]
    code_path: str = LAMBDA_DEFAULTS["code_path"]
    route_key: str = API_DEFAULTS["route_key"]
    tags: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_TAGS))

    @property
    def is_production(self) -> bool:
        """Check if this is a production stage."""
        return self.stage == "prod"

    def get_tags(self) -> dict[str, str]:
        """Get stage-specific tags."""
        return {
            **self.tags,
            "Stage": self.stage,
        }
