"""
Compute resource factories.

Factories and components:
- lambda_function: Info handler function and its API Gateway invoke permission
"""

from infra.components.compute.lambda_function import LAMBDA_FACTORIES, LambdaComponent

__all__ = [
    "LAMBDA_FACTORIES",
    "LambdaComponent",
]
