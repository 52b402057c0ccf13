"""Pytest fixtures for infrastructure tests."""

from pathlib import Path

import pulumi
import pytest

from pulumi_mocks import InfoApiMocks

PROJECT_ROOT = Path(__file__).parent.parent.parent

# Resources created by any test are recorded by the mocks, never by AWS
pulumi.runtime.set_mocks(InfoApiMocks(), project="info-api", stack="dev", preview=False)


@pytest.fixture
def iac_project_root():
    """Return the infra package directory."""
    return PROJECT_ROOT / "infra"


@pytest.fixture
def python_files_in_iac(iac_project_root):
    """Return all Python files in the infra package."""
    return [f for f in iac_project_root.rglob("*.py") if "__pycache__" not in str(f)]


@pytest.fixture
def config():
    """Default configuration for the 'dev' stage."""
    from infra.configs.base import TopologyConfig

    return TopologyConfig(stage="dev")


@pytest.fixture
def topology(config):
    """Topology built from the default configuration."""
    from infra.topology.builder import build_topology

    return build_topology(config)
