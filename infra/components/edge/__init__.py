"""
Edge resource factories.

Factories and components:
- api_gateway: HTTP API, VPC Link, Lambda proxy integration, route, stage
"""

from infra.components.edge.api_gateway import API_GATEWAY_FACTORIES, ApiGatewayComponent

__all__ = [
    "API_GATEWAY_FACTORIES",
    "ApiGatewayComponent",
]
