"""Core exception types shared by the configuration and topology layers."""

from infra.core.exceptions import (
    InfraException,
    ConfigurationError,
    TopologyError,
    DuplicateResourceError,
    DanglingReferenceError,
    DependencyCycleError,
)

__all__ = [
    "InfraException",
    "ConfigurationError",
    "TopologyError",
    "DuplicateResourceError",
    "DanglingReferenceError",
    "DependencyCycleError",
]
