"""
Environment configuration loader.

Loads and validates configuration from Pulumi stack config files.
"""

import pulumi

from infra.configs.base import IngressRule, TopologyConfig
from infra.configs.constants import (
    DEFAULT_TAGS,
    INGRESS_RULES,
    LAMBDA_DEFAULTS,
    PROJECT_NAME,
    RESOURCE_SUFFIXES,
    SUBNET_CIDRS,
    VPC_CIDR,
)
from infra.configs.validation import validate_config
from infra.core.exceptions import ConfigurationError
from infra.utils.naming import ResourceNamer
from infra.utils.tags import merge_tags


def _load_ingress_rules(value: object, resource: str) -> tuple[IngressRule, ...]:
    """Parse the ingress_rules stack value, a list of rule objects."""
    if value is None:
        return tuple(IngressRule.from_dict(rule, resource) for rule in INGRESS_RULES)
    if not isinstance(value, list):
        raise ConfigurationError(
            f"ingress_rules must be a list of rule objects, got {type(value).__name__}",
            resource=resource,
            field="ingress",
        )
    return tuple(
        IngressRule.from_dict(rule, resource, f"ingress[{index}]")
        for index, rule in enumerate(value)
    )


def _load_tags(value: object) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigurationError(
            f"tags must be an object of string pairs, got {type(value).__name__}",
            resource="topology",
            field="tags",
        )
    return value


def get_config() -> TopologyConfig:
    """
    Load topology configuration from Pulumi stack config.

    The stage name is the Pulumi stack name; every other value falls back to
    the defaults in infra.configs.constants.

    Returns:
        TopologyConfig: Validated configuration object

    Raises:
        ConfigurationError: If a configured value is malformed
    """
    config = pulumi.Config()
    project = config.get("project") or PROJECT_NAME
    security_group = ResourceNamer(project).name(RESOURCE_SUFFIXES["security_group"])

    ingress = _load_ingress_rules(config.get_object("ingress_rules"), security_group)
    tags = _load_tags(config.get_object("tags"))

    return validate_config(TopologyConfig(
        stage=pulumi.get_stack(),
        project=project,
        vpc_cidr=config.get("vpc_cidr") or VPC_CIDR,
        private_subnet_cidr=config.get("private_subnet_cidr") or SUBNET_CIDRS["private"],
        public_subnet_cidr=config.get("public_subnet_cidr") or SUBNET_CIDRS["public"],
        ingress_rules=ingress,
        lambda_runtime=config.get("lambda_runtime") or LAMBDA_DEFAULTS["runtime"],
        code_path=config.get("code_path") or LAMBDA_DEFAULTS["code_path"],
        tags=merge_tags(DEFAULT_TAGS, tags),
    ))
