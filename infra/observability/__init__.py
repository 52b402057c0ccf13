"""Logging setup for the descriptor layers."""

from infra.observability.logger import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
