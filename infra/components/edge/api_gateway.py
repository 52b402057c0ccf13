"""
API Gateway factories for the public GET /info endpoint.

The 5-Resource Chain:
1. API: The HTTP API container (protocol type).
2. VPC Link: ENIs in the private subnet that let API Gateway tunnel into the
   VPC. Declared alongside the API; the Lambda integration does not use it.
3. Integration: AWS_PROXY to the Lambda function ARN. The function receives
   the raw request event and returns the full HTTP response.
4. Route: "GET /info" -> "integrations/<integration id>".
5. Stage: Named after the Pulumi stack, auto-deployed on every change.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from infra.components.base import DomainComponent
from infra.topology.model import ResourceKind


def create_api(name: str, props: dict, opts: pulumi.ResourceOptions) -> aws.apigatewayv2.Api:
    return aws.apigatewayv2.Api(name, opts=opts, **props)


def create_vpc_link(
    name: str,
    props: dict,
    opts: pulumi.ResourceOptions,
) -> aws.apigatewayv2.VpcLink:
    return aws.apigatewayv2.VpcLink(name, opts=opts, **props)


def create_integration(
    name: str,
    props: dict,
    opts: pulumi.ResourceOptions,
) -> aws.apigatewayv2.Integration:
    return aws.apigatewayv2.Integration(name, opts=opts, **props)


def create_route(
    name: str,
    props: dict,
    opts: pulumi.ResourceOptions,
) -> aws.apigatewayv2.Route:
    return aws.apigatewayv2.Route(name, opts=opts, **props)


def create_stage(
    name: str,
    props: dict,
    opts: pulumi.ResourceOptions,
) -> aws.apigatewayv2.Stage:
    return aws.apigatewayv2.Stage(name, opts=opts, **props)


API_GATEWAY_FACTORIES = {
    ResourceKind.API: create_api,
    ResourceKind.VPC_LINK: create_vpc_link,
    ResourceKind.INTEGRATION: create_integration,
    ResourceKind.ROUTE: create_route,
    ResourceKind.STAGE: create_stage,
}


@dataclass
class ApiGatewayOutputs:
    """Output values from API Gateway component."""
    api_endpoints: dict[str, pulumi.Output[str]]
    execution_arns: dict[str, pulumi.Output[str]]
    stage_names: dict[str, pulumi.Output[str]]


class ApiGatewayComponent(DomainComponent):
    """HTTP API exposing the info handler."""

    TYPE = "custom:edge:ApiGateway"
    SUFFIX = "edge"
    FACTORIES = API_GATEWAY_FACTORIES

    def get_outputs(self) -> ApiGatewayOutputs:
        """Get API Gateway output values."""
        return ApiGatewayOutputs(
            api_endpoints=self.outputs_of(aws.apigatewayv2.Api, "api_endpoint"),
            execution_arns=self.outputs_of(aws.apigatewayv2.Api, "execution_arn"),
            stage_names=self.outputs_of(aws.apigatewayv2.Stage, "name"),
        )
