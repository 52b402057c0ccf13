"""Pulumi mocks shared by the infrastructure tests."""

import pulumi

# Execution ARN and endpoint the mocked API Gateway reports
MOCK_EXECUTION_ARN = "arn:aws:execute-api:ap-southeast-2:123456789012:abc123"
MOCK_API_ENDPOINT = "https://abc123.execute-api.ap-southeast-2.amazonaws.com"


class InfoApiMocks(pulumi.runtime.Mocks):
    """Echo inputs back as outputs and fill in computed attributes."""

    def new_resource(self, args: pulumi.runtime.MockResourceArgs):
        outputs = {
            "arn": f"arn:aws:mock:ap-southeast-2:123456789012:{args.name}",
            "name": args.name,
            **args.inputs,
        }
        if args.typ == "aws:apigatewayv2/api:Api":
            outputs["executionArn"] = MOCK_EXECUTION_ARN
            outputs["apiEndpoint"] = MOCK_API_ENDPOINT
        return [f"{args.name}-id", outputs]

    def call(self, args: pulumi.runtime.MockCallArgs):
        return {}
