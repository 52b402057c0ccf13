"""
Topology descriptor: resource declarations and their dependency graph.

Pure Python; building a topology never talks to Pulumi or AWS.
"""

from infra.topology.model import (
    Edge,
    EdgeKind,
    Ref,
    ResourceDeclaration,
    ResourceKind,
)
from infra.topology.graph import TopologyGraph
from infra.topology.builder import Topology, build_topology

__all__ = [
    "Edge",
    "EdgeKind",
    "Ref",
    "ResourceDeclaration",
    "ResourceKind",
    "TopologyGraph",
    "Topology",
    "build_topology",
]
