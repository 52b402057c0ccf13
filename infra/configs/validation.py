"""
Configuration validation.

Checks every constant the topology is built from and raises
ConfigurationError naming the offending resource and field. Runs before
any declaration is added to the graph, so no partial topology escapes.
"""

import ipaddress
import re

from infra.configs.base import IngressRule, TopologyConfig
from infra.configs.constants import ALLOWED_PROTOCOLS, RESOURCE_SUFFIXES
from infra.core.exceptions import ConfigurationError
from infra.observability.logger import get_logger
from infra.utils.naming import ResourceNamer

logger = get_logger(__name__)

# API Gateway v2 stage names: alphanumerics, hyphen, underscore, or "$default"
_STAGE_NAME = re.compile(r"^(\$default|[A-Za-z0-9_-]{1,128})$")
_HANDLER = re.compile(r"^[A-Za-z_][\w.]*\.[A-Za-z_]\w*$")
_ROUTE_KEY = re.compile(r"^(ANY|GET|POST|PUT|PATCH|DELETE|HEAD|OPTIONS) /\S*$")


def parse_cidr(value: str, resource: str, field: str = "cidr_block") -> ipaddress.IPv4Network:
    """
    Parse an IPv4 CIDR block.

    Args:
        value: CIDR string such as '10.0.0.0/16'
        resource: Resource the block belongs to
        field: Field name reported on failure

    Returns:
        Parsed network

    Raises:
        ConfigurationError: If the value is not a strict IPv4 network
    """
    try:
        network = ipaddress.ip_network(value, strict=True)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"Invalid CIDR block {value!r}: {e}",
            resource=resource,
            field=field,
        ) from e
    if not isinstance(network, ipaddress.IPv4Network):
        raise ConfigurationError(
            f"CIDR block {value!r} is not IPv4",
            resource=resource,
            field=field,
        )
    return network


def validate_subnets(config: TopologyConfig) -> None:
    """Check both subnets are valid, inside the VPC and disjoint."""
    namer = ResourceNamer(config.project)
    private_name = namer.name(RESOURCE_SUFFIXES["private_subnet"])
    public_name = namer.name(RESOURCE_SUFFIXES["public_subnet"])

    vpc = parse_cidr(config.vpc_cidr, namer.name(RESOURCE_SUFFIXES["vpc"]))
    private = parse_cidr(config.private_subnet_cidr, private_name)
    public = parse_cidr(config.public_subnet_cidr, public_name)

    for resource, subnet in ((private_name, private), (public_name, public)):
        if not subnet.subnet_of(vpc):
            raise ConfigurationError(
                f"Subnet {subnet} is outside VPC range {vpc}",
                resource=resource,
                field="cidr_block",
            )

    if private.overlaps(public):
        raise ConfigurationError(
            f"Subnets {private} and {public} overlap",
            resource=public_name,
            field="cidr_block",
        )


def validate_ingress_rules(rules: tuple[IngressRule, ...], resource: str) -> None:
    """Check the ingress rule list of the named security group."""
    if not rules:
        raise ConfigurationError(
            "At least one ingress rule is required",
            resource=resource,
            field="ingress",
        )

    for index, rule in enumerate(rules):
        field = f"ingress[{index}]"
        if rule.protocol not in ALLOWED_PROTOCOLS:
            raise ConfigurationError(
                f"Unsupported protocol {rule.protocol!r}",
                resource=resource,
                field=f"{field}.protocol",
            )
        for port_field, port in (("from_port", rule.from_port), ("to_port", rule.to_port)):
            if not isinstance(port, int) or isinstance(port, bool) or not 0 <= port <= 65535:
                raise ConfigurationError(
                    f"Port {port!r} out of range 0-65535",
                    resource=resource,
                    field=f"{field}.{port_field}",
                )
        if rule.from_port > rule.to_port:
            raise ConfigurationError(
                f"Port range {rule.from_port}-{rule.to_port} is reversed",
                resource=resource,
                field=f"{field}.from_port",
            )
        if not rule.cidr_blocks:
            raise ConfigurationError(
                "Ingress rule has no source CIDR blocks",
                resource=resource,
                field=f"{field}.cidr_blocks",
            )
        for cidr in rule.cidr_blocks:
            parse_cidr(cidr, resource, f"{field}.cidr_blocks")


def validate_config(config: TopologyConfig) -> TopologyConfig:
    """
    Validate a topology configuration.

    Args:
        config: Configuration to check

    Returns:
        The same configuration, for chaining

    Raises:
        ConfigurationError: On the first malformed value
    """
    if not config.project or not re.fullmatch(r"[a-z0-9][a-z0-9-]*", config.project):
        raise ConfigurationError(
            f"Invalid project name {config.project!r}",
            resource="topology",
            field="project",
        )

    namer = ResourceNamer(config.project)
    function = namer.name(RESOURCE_SUFFIXES["function"])

    if not _STAGE_NAME.match(config.stage or ""):
        raise ConfigurationError(
            f"Invalid stage name {config.stage!r}",
            resource=namer.name(RESOURCE_SUFFIXES["stage"]),
            field="name",
        )

    validate_subnets(config)
    validate_ingress_rules(
        config.ingress_rules,
        namer.name(RESOURCE_SUFFIXES["security_group"]),
    )

    if not _HANDLER.match(config.lambda_handler):
        raise ConfigurationError(
            f"Handler must be module.function, got {config.lambda_handler!r}",
            resource=function,
            field="handler",
        )
    if not config.code_path.endswith(".zip"):
        raise ConfigurationError(
            f"Code archive must be a .zip bundle, got {config.code_path!r}",
            resource=function,
            field="code",
        )
    if not config.lambda_runtime:
        raise ConfigurationError(
            "Lambda runtime is required",
            resource=function,
            field="runtime",
        )

    if not _ROUTE_KEY.match(config.route_key):
        raise ConfigurationError(
            f"Invalid route key {config.route_key!r}",
            resource=namer.name(RESOURCE_SUFFIXES["route"]),
            field="route_key",
        )

    for key, value in config.tags.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise ConfigurationError(
                f"Tag {key!r} must map a string to a string",
                resource="topology",
                field="tags",
            )

    logger.debug("Configuration for stage %s is valid", config.stage)
    return config
