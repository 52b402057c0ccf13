"""
IAM role factories for the Lambda function.

Creates:
- Lambda execution role trusted by lambda.amazonaws.com
- Attachment of the AWSLambdaBasicExecutionRole managed policy (CloudWatch
  Logs only); no other permissions are granted
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from infra.components.base import DomainComponent
from infra.topology.model import ResourceKind


def create_role(name: str, props: dict, opts: pulumi.ResourceOptions) -> aws.iam.Role:
    return aws.iam.Role(name, opts=opts, **props)


def create_role_policy_attachment(
    name: str,
    props: dict,
    opts: pulumi.ResourceOptions,
) -> aws.iam.RolePolicyAttachment:
    return aws.iam.RolePolicyAttachment(name, opts=opts, **props)


IAM_FACTORIES = {
    ResourceKind.IAM_ROLE: create_role,
    ResourceKind.ROLE_POLICY_ATTACHMENT: create_role_policy_attachment,
}


@dataclass
class IamOutputs:
    """Output values from IAM component."""
    role_arns: dict[str, pulumi.Output[str]]


class IamRolesComponent(DomainComponent):
    """Execution roles and their managed policy attachments."""

    TYPE = "custom:security:IamRoles"
    SUFFIX = "iam"
    FACTORIES = IAM_FACTORIES

    def get_outputs(self) -> IamOutputs:
        return IamOutputs(role_arns=self.outputs_of(aws.iam.Role, "arn"))
