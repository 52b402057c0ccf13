"""
Exception hierarchy for the Info API infrastructure.

Provides layered exception structure for configuration and topology errors.
All exceptions include context identifying the offending resource.

Dependencies: None (pure domain layer)
System role: Fail-fast error reporting before anything reaches Pulumi
"""

from typing import Any


class InfraException(Exception):
    """Base exception for all infrastructure descriptor errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(InfraException):
    """Raised when a configuration constant is malformed."""

    def __init__(
        self,
        message: str,
        resource: str | None = None,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize configuration error.

        Args:
            message: Error message
            resource: Resource the bad value belongs to (e.g. 'private-subnet')
            field: Field name that failed validation (e.g. 'cidr_block')
            details: Additional context
        """
        details = details or {}
        if resource:
            details["resource"] = resource
        if field:
            details["field"] = field
        self.resource = resource
        self.field = field
        super().__init__(message, details)


class TopologyError(InfraException):
    """Base exception for resource graph errors."""

    pass


class DuplicateResourceError(TopologyError):
    """Raised when a logical name is declared twice."""

    def __init__(self, name: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["resource"] = name
        self.name = name
        super().__init__(f"Resource already declared: {name}", details)


class DanglingReferenceError(TopologyError):
    """Raised when a declaration references a resource that does not exist yet."""

    def __init__(
        self,
        resource: str,
        reference: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize dangling reference error.

        Args:
            resource: Declaration holding the reference
            reference: Name of the missing resource
            details: Additional context
        """
        details = details or {}
        details["resource"] = resource
        details["reference"] = reference
        self.resource = resource
        self.reference = reference
        super().__init__(f"Resource {resource} references undeclared {reference}", details)


class DependencyCycleError(TopologyError):
    """Raised when the dependency graph contains a cycle."""

    def __init__(self, cycle: list[str], details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["cycle"] = cycle
        self.cycle = cycle
        super().__init__(f"Dependency cycle: {' -> '.join(cycle)}", details)
