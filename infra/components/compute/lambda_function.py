"""
Lambda function factories for the info handler.

Creates:
- Lambda function from a zipped bundle (code_path), entered at
  main.info_handler
- Permission letting API Gateway invoke the function
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from infra.components.base import DomainComponent
from infra.topology.model import ResourceKind


def create_function(
    name: str,
    props: dict,
    opts: pulumi.ResourceOptions,
) -> aws.lambda_.Function:
    """Create the function, packaging code_path as a file archive."""
    code = pulumi.FileArchive(props.pop("code_path"))
    return aws.lambda_.Function(name, code=code, opts=opts, **props)


def create_permission(
    name: str,
    props: dict,
    opts: pulumi.ResourceOptions,
) -> aws.lambda_.Permission:
    return aws.lambda_.Permission(name, opts=opts, **props)


LAMBDA_FACTORIES = {
    ResourceKind.FUNCTION: create_function,
    ResourceKind.PERMISSION: create_permission,
}


@dataclass
class LambdaOutputs:
    """Output values from Lambda component."""
    function_arns: dict[str, pulumi.Output[str]]
    function_names: dict[str, pulumi.Output[str]]


class LambdaComponent(DomainComponent):
    """Info handler function and the permission letting API Gateway call it."""

    TYPE = "custom:compute:Lambda"
    SUFFIX = "compute"
    FACTORIES = LAMBDA_FACTORIES

    def get_outputs(self) -> LambdaOutputs:
        """Get Lambda output values."""
        return LambdaOutputs(
            function_arns=self.outputs_of(aws.lambda_.Function, "arn"),
            function_names=self.outputs_of(aws.lambda_.Function, "name"),
        )
