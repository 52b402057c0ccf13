"""Tests for configuration loading and validation."""

import json
from dataclasses import replace

import pulumi
import pytest

from infra.configs.base import IngressRule, TopologyConfig
from infra.configs.environment import get_config
from infra.configs.validation import parse_cidr, validate_config
from infra.core.exceptions import ConfigurationError
from infra.topology.builder import build_topology


class FakeStackConfig:
    """Stand-in for pulumi.Config backed by a dict of raw strings."""

    values: dict[str, str] = {}

    def __init__(self, name: str | None = None) -> None:
        pass

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def get_object(self, key: str):
        value = self.values.get(key)
        return None if value is None else json.loads(value)


@pytest.fixture
def stack_config(monkeypatch):
    """Replace pulumi.Config with stack values set by the test."""
    def _set(values: dict[str, str]) -> None:
        monkeypatch.setattr(FakeStackConfig, "values", dict(values))

    monkeypatch.setattr(pulumi, "Config", FakeStackConfig)
    return _set


class TestParseCidr:
    """Tests for CIDR parsing."""

    def test_parses_valid_block(self):
        network = parse_cidr("10.0.0.0/16", "vpc")
        assert network.prefixlen == 16

    @pytest.mark.parametrize("value", ["10.0.0.0/33", "10.0.0/16", "not-a-cidr", ""])
    def test_rejects_malformed_block(self, value):
        with pytest.raises(ConfigurationError) as exc_info:
            parse_cidr(value, "vpc")

        assert exc_info.value.resource == "vpc"
        assert exc_info.value.field == "cidr_block"

    def test_rejects_host_bits(self):
        """A block with host bits set is not a network address."""
        with pytest.raises(ConfigurationError):
            parse_cidr("10.0.1.5/24", "private-subnet")

    def test_rejects_ipv6(self):
        with pytest.raises(ConfigurationError, match="not IPv4"):
            parse_cidr("2001:db8::/32", "vpc")


class TestValidateConfig:
    """Tests for validate_config."""

    def test_default_config_is_valid(self, config):
        assert validate_config(config) is config

    def test_default_subnets_sit_inside_vpc(self, config):
        vpc = parse_cidr(config.vpc_cidr, "vpc")
        assert parse_cidr(config.private_subnet_cidr, "private-subnet").subnet_of(vpc)
        assert parse_cidr(config.public_subnet_cidr, "public-subnet").subnet_of(vpc)

    def test_subnet_outside_vpc_fails(self, config):
        bad = replace(config, private_subnet_cidr="192.168.1.0/24")

        with pytest.raises(ConfigurationError) as exc_info:
            validate_config(bad)

        assert exc_info.value.resource == "info-api-private-subnet"
        assert exc_info.value.field == "cidr_block"
        assert "outside VPC range" in str(exc_info.value)

    def test_public_subnet_outside_vpc_fails(self, config):
        bad = replace(config, public_subnet_cidr="10.1.2.0/24")

        with pytest.raises(ConfigurationError) as exc_info:
            validate_config(bad)

        assert exc_info.value.resource == "info-api-public-subnet"

    def test_overlapping_subnets_fail(self, config):
        bad = replace(config, public_subnet_cidr="10.0.1.0/25")

        with pytest.raises(ConfigurationError, match="overlap"):
            validate_config(bad)

    def test_invalid_vpc_cidr_fails(self, config):
        with pytest.raises(ConfigurationError) as exc_info:
            validate_config(replace(config, vpc_cidr="10.0.0.0/99"))

        assert exc_info.value.resource == "info-api-vpc"

    def test_empty_ingress_list_fails(self, config):
        with pytest.raises(ConfigurationError) as exc_info:
            validate_config(replace(config, ingress_rules=()))

        assert exc_info.value.resource == "info-api-api-gateway-security-group"
        assert exc_info.value.field == "ingress"

    @pytest.mark.parametrize(
        "rule, field",
        [
            (IngressRule(80, 80, "carrier-pigeon", ("0.0.0.0/0",)), "ingress[0].protocol"),
            (IngressRule(-1, 80, "tcp", ("0.0.0.0/0",)), "ingress[0].from_port"),
            (IngressRule(80, 70000, "tcp", ("0.0.0.0/0",)), "ingress[0].to_port"),
            (IngressRule(443, 80, "tcp", ("0.0.0.0/0",)), "ingress[0].from_port"),
            (IngressRule(80, 80, "tcp", ()), "ingress[0].cidr_blocks"),
            (IngressRule(80, 80, "tcp", ("0.0.0.0/99",)), "ingress[0].cidr_blocks"),
        ],
    )
    def test_malformed_ingress_rule_fails(self, config, rule, field):
        with pytest.raises(ConfigurationError) as exc_info:
            validate_config(replace(config, ingress_rules=(rule,)))

        assert exc_info.value.field == field

    @pytest.mark.parametrize("stage", ["", "bad stage", "dev/1"])
    def test_invalid_stage_name_fails(self, config, stage):
        with pytest.raises(ConfigurationError) as exc_info:
            validate_config(replace(config, stage=stage))

        assert exc_info.value.resource == "info-api-api-stage"

    @pytest.mark.parametrize("stage", ["dev", "prod", "feature_42", "$default"])
    def test_valid_stage_names(self, config, stage):
        validate_config(replace(config, stage=stage))

    def test_handler_without_function_fails(self, config):
        with pytest.raises(ConfigurationError) as exc_info:
            validate_config(replace(config, lambda_handler="main"))

        assert exc_info.value.field == "handler"

    def test_code_path_must_be_zip(self, config):
        with pytest.raises(ConfigurationError) as exc_info:
            validate_config(replace(config, code_path="./lambda/main.py"))

        assert exc_info.value.field == "code"

    def test_invalid_route_key_fails(self, config):
        with pytest.raises(ConfigurationError):
            validate_config(replace(config, route_key="FETCH /info"))

    def test_non_string_tag_fails(self, config):
        with pytest.raises(ConfigurationError) as exc_info:
            validate_config(replace(config, tags={"Name": 7}))

        assert exc_info.value.field == "tags"

    def test_error_string_includes_details(self, config):
        with pytest.raises(ConfigurationError) as exc_info:
            validate_config(replace(config, private_subnet_cidr="192.168.1.0/24"))

        message = str(exc_info.value)
        assert "private-subnet" in message
        assert "cidr_block" in message


class TestIngressRule:
    """Tests for IngressRule parsing."""

    def test_from_dict_round_trips_to_args(self):
        data = {
            "description": "HTTPS inbound",
            "from_port": 443,
            "to_port": 443,
            "protocol": "tcp",
            "cidr_blocks": ["10.0.0.0/8"],
        }

        rule = IngressRule.from_dict(data)

        assert rule.cidr_blocks == ("10.0.0.0/8",)
        assert rule.to_args() == data

    def test_from_dict_missing_keys_fails(self):
        with pytest.raises(ConfigurationError, match="from_port"):
            IngressRule.from_dict({"to_port": 80, "protocol": "tcp"})

    def test_from_dict_rejects_non_object(self):
        with pytest.raises(ConfigurationError, match="must be an object") as exc_info:
            IngressRule.from_dict(80, "web-sg", "ingress[2]")

        assert exc_info.value.resource == "web-sg"
        assert exc_info.value.field == "ingress[2]"

    def test_from_dict_rejects_bare_cidr_string(self):
        data = {"from_port": 80, "to_port": 80, "protocol": "tcp", "cidr_blocks": "0.0.0.0/0"}

        with pytest.raises(ConfigurationError, match="must be a list") as exc_info:
            IngressRule.from_dict(data)

        assert exc_info.value.field == "ingress.cidr_blocks"


class TestTopologyConfig:
    """Tests for TopologyConfig."""

    def test_defaults(self):
        config = TopologyConfig(stage="dev")

        assert config.vpc_cidr == "10.0.0.0/16"
        assert config.private_subnet_cidr == "10.0.1.0/24"
        assert config.public_subnet_cidr == "10.0.2.0/24"
        assert config.lambda_handler == "main.info_handler"
        assert config.route_key == "GET /info"
        assert len(config.ingress_rules) == 1
        assert config.ingress_rules[0].from_port == 80

    def test_get_tags_adds_stage(self):
        config = TopologyConfig(stage="prod")

        assert config.get_tags()["Stage"] == "prod"
        assert config.get_tags()["Name"] == "neara-task"
        assert config.is_production


class TestGetConfig:
    """Tests for loading configuration from the Pulumi stack."""

    def test_defaults_use_stack_name_as_stage(self, stack_config):
        stack_config({})

        config = get_config()

        assert config.stage == "dev"
        assert config.vpc_cidr == "10.0.0.0/16"

    def test_overrides_are_applied(self, stack_config):
        stack_config({
            "vpc_cidr": "10.8.0.0/16",
            "private_subnet_cidr": "10.8.1.0/24",
            "public_subnet_cidr": "10.8.2.0/24",
            "tags": '{"Owner": "platform"}',
        })

        config = get_config()

        assert config.private_subnet_cidr == "10.8.1.0/24"
        assert config.tags["Owner"] == "platform"
        assert config.tags["ManagedBy"] == "pulumi"

    def test_bad_override_fails_fast(self, stack_config):
        stack_config({"vpc_cidr": "10.8.0.0/16"})

        with pytest.raises(ConfigurationError) as exc_info:
            get_config()

        assert exc_info.value.resource == "info-api-private-subnet"

    def test_empty_ingress_override_fails(self, stack_config):
        stack_config({"ingress_rules": "[]"})

        with pytest.raises(ConfigurationError, match="ingress rule"):
            get_config()

    @pytest.mark.parametrize(
        "values, field",
        [
            ({"tags": '["a", "b"]'}, "tags"),
            ({"ingress_rules": "[80]"}, "ingress[0]"),
            ({"ingress_rules": '{"from_port": 80}'}, "ingress"),
            (
                {"ingress_rules": '[{"from_port": 80, "to_port": 80, "protocol": "tcp",'
                                  ' "cidr_blocks": "0.0.0.0/0"}]'},
                "ingress[0].cidr_blocks",
            ),
        ],
    )
    def test_wrongly_shaped_values_fail_fast(self, stack_config, values, field):
        stack_config(values)

        with pytest.raises(ConfigurationError) as exc_info:
            get_config()

        assert exc_info.value.field == field

    def test_ingress_errors_name_the_project_security_group(self, stack_config):
        stack_config({"project": "billing", "ingress_rules": "[80]"})

        with pytest.raises(ConfigurationError) as exc_info:
            get_config()

        assert exc_info.value.resource == "billing-api-gateway-security-group"


class TestErrorResourceNames:
    """Errors name resources by their declared logical names."""

    def test_subnet_error_uses_project_prefix(self, config):
        bad = replace(config, project="billing", private_subnet_cidr="192.168.1.0/24")

        with pytest.raises(ConfigurationError) as exc_info:
            validate_config(bad)

        assert exc_info.value.resource == "billing-private-subnet"

    def test_handler_error_matches_declared_function(self, config):
        bad = replace(config, project="billing", lambda_handler="main")

        with pytest.raises(ConfigurationError) as exc_info:
            validate_config(bad)

        topology = build_topology(replace(bad, lambda_handler="main.info_handler"))
        assert exc_info.value.resource == topology.names["function"]
        assert exc_info.value.resource in topology.graph
