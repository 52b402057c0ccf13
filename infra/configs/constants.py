"""
Infrastructure constants for the Info API.

Contains CIDR blocks, ingress rules, Lambda settings and default tags.
"""

from typing import Final

# Project identifier used for logical resource names
PROJECT_NAME: Final[str] = "info-api"

# VPC Configuration
VPC_CIDR: Final[str] = "10.0.0.0/16"

# Subnet CIDR blocks
SUBNET_CIDRS: Final[dict[str, str]] = {
    "private": "10.0.1.0/24",  # VPC Link ENIs, egress via NAT
    "public": "10.0.2.0/24",   # NAT gateway
}

# Destination of every default route
DEFAULT_ROUTE_CIDR: Final[str] = "0.0.0.0/0"

# Security group ingress rules for the VPC Link
INGRESS_RULES: Final[list[dict]] = [
    {
        "description": "HTTP inbound",
        "from_port": 80,
        "to_port": 80,
        "protocol": "tcp",
        "cidr_blocks": ["0.0.0.0/0"],
    },
]

# Protocols accepted by EC2 security group rules ("-1" means all)
ALLOWED_PROTOCOLS: Final[frozenset[str]] = frozenset({"tcp", "udp", "icmp", "-1"})

# Lambda configuration
LAMBDA_DEFAULTS: Final[dict[str, str]] = {
    "runtime": "python3.12",
    "handler": "main.info_handler",  # fileName.methodName
    "code_path": "./lambda/main.py.zip",
}

# Managed policy granted to the Lambda execution role
LAMBDA_BASIC_EXECUTION_POLICY: Final[str] = (
    "arn:aws:iam::aws:policy/service-role/AWSLambdaBasicExecutionRole"
)

# API Gateway configuration
API_DEFAULTS: Final[dict[str, str]] = {
    "protocol_type": "HTTP",
    "route_key": "GET /info",
    "integration_type": "AWS_PROXY",
    "integration_method": "GET",
}

# Lambda invoke permission granted to API Gateway
INVOKE_PERMISSION: Final[dict[str, str]] = {
    "action": "lambda:InvokeFunction",
    "principal": "apigateway.amazonaws.com",
    "source_arn_template": "{}/*/*",  # any stage, any method/path
}

# Default tags applied to all taggable resources
DEFAULT_TAGS: Final[dict[str, str]] = {
    "Name": "neara-task",
    "Project": PROJECT_NAME,
    "ManagedBy": "pulumi",
}

# Stack outputs written to the local env file
OUTPUTS_ENV_FILE: Final[str] = "infrastructure.env"

# Role -> logical name suffix. Roles are stable keys for looking resources up.
RESOURCE_SUFFIXES: Final[dict[str, str]] = {
    "vpc": "vpc",
    "private_subnet": "private-subnet",
    "public_subnet": "public-subnet",
    "igw": "igw",
    "nat_eip": "nat-eip",
    "nat_gateway": "natgw",
    "private_route_table": "private-route-table",
    "public_route_table": "public-route-table",
    "private_association": "private-subnet-association",
    "main_association": "main-route-association",
    "security_group": "api-gateway-security-group",
    "lambda_role": "info-handler-role",
    "lambda_role_attachment": "lambda-role-attachment",
    "function": "info-handler",
    "api": "api-gateway",
    "vpc_link": "vpc-link",
    "permission": "lambda-permission",
    "integration": "integration",
    "route": "get-info-route",
    "stage": "api-stage",
}
