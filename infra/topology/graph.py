"""
Dependency graph of resource declarations.

Implicit edges (attribute references) and explicit edges (depends_on hints)
share one Edge structure, so ordering and validation have one code path.
"""

from __future__ import annotations

import hashlib
import heapq
import json
from typing import Any, Iterator

from infra.core.exceptions import (
    DanglingReferenceError,
    DependencyCycleError,
    DuplicateResourceError,
)
from infra.observability.logger import get_logger
from infra.topology.model import Edge, EdgeKind, ResourceDeclaration, ResourceKind

logger = get_logger(__name__)


class TopologyGraph:
    """
    Directed acyclic graph of resource declarations.

    Declarations can only reference resources that are already in the graph,
    so insertion order is always a valid creation order.
    """

    def __init__(self) -> None:
        self._declarations: dict[str, ResourceDeclaration] = {}
        self._index: dict[str, int] = {}
        self._edges: list[Edge] = []
        # Adjacency: name -> edges leaving it (its dependencies)
        self._outgoing: dict[str, list[Edge]] = {}
        # Reverse adjacency: name -> edges arriving at it (its dependents)
        self._incoming: dict[str, list[Edge]] = {}

    def add(self, declaration: ResourceDeclaration) -> ResourceDeclaration:
        """
        Register a declaration and its dependency edges.

        Args:
            declaration: Resource to add

        Returns:
            The declaration, so callers can keep a handle to it

        Raises:
            DuplicateResourceError: If the logical name is taken
            DanglingReferenceError: If a reference or depends_on name is unknown
        """
        name = declaration.name
        if name in self._declarations:
            raise DuplicateResourceError(name)

        edges = [
            Edge(name, ref.resource, EdgeKind.IMPLICIT, ref.attribute)
            for ref in declaration.references()
        ]
        edges.extend(
            Edge(name, dependency, EdgeKind.EXPLICIT)
            for dependency in declaration.depends_on
        )
        for edge in edges:
            if edge.target not in self._declarations:
                raise DanglingReferenceError(name, edge.target)

        self._index[name] = len(self._declarations)
        self._declarations[name] = declaration
        self._outgoing[name] = []
        self._incoming[name] = []
        for edge in edges:
            self._link(edge)

        logger.debug("Declared %s (%s) with %d edges", name, declaration.kind.name, len(edges))
        return declaration

    def add_dependency(self, dependent: str, dependency: str) -> Edge:
        """
        Add an explicit edge between two declared resources.

        Raises:
            DanglingReferenceError: If either name is unknown
            DependencyCycleError: If the edge would close a cycle
        """
        for name in (dependent, dependency):
            if name not in self._declarations:
                raise DanglingReferenceError(dependent, name)

        path = self._path(dependency, dependent)
        if path is not None:
            raise DependencyCycleError([dependent, *path])

        edge = Edge(dependent, dependency, EdgeKind.EXPLICIT)
        self._link(edge)
        return edge

    def _link(self, edge: Edge) -> None:
        self._edges.append(edge)
        self._outgoing[edge.source].append(edge)
        self._incoming[edge.target].append(edge)

    def _path(self, start: str, goal: str) -> list[str] | None:
        """Find a dependency path start -> ... -> goal, if any."""
        stack = [(start, [start])]
        seen = set()
        while stack:
            node, path = stack.pop()
            if node == goal:
                return path
            if node in seen:
                continue
            seen.add(node)
            for edge in self._outgoing[node]:
                stack.append((edge.target, [*path, edge.target]))
        return None

    def get(self, name: str) -> ResourceDeclaration | None:
        """Get declaration by logical name."""
        return self._declarations.get(name)

    def by_kind(self, kind: ResourceKind) -> list[ResourceDeclaration]:
        """Get all declarations of a kind, in declaration order."""
        return [d for d in self._declarations.values() if d.kind == kind]

    def dependencies_of(self, name: str) -> list[str]:
        """Names this resource depends on, without duplicates."""
        return list(dict.fromkeys(e.target for e in self._outgoing.get(name, [])))

    def dependents_of(self, name: str) -> list[str]:
        """Names that depend on this resource, without duplicates."""
        return list(dict.fromkeys(e.source for e in self._incoming.get(name, [])))

    def explicit_dependencies_of(self, name: str) -> list[str]:
        """Names listed as depends_on hints for this resource."""
        return list(dict.fromkeys(
            e.target for e in self._outgoing.get(name, []) if e.kind == EdgeKind.EXPLICIT
        ))

    @property
    def edges(self) -> list[Edge]:
        return list(self._edges)

    def topological_order(self) -> list[ResourceDeclaration]:
        """
        Order declarations so every dependency precedes its dependents.

        Kahn's algorithm with ties broken by declaration order, so the result
        is the same on every run.

        Raises:
            DependencyCycleError: If the graph contains a cycle
        """
        pending = {name: len(self.dependencies_of(name)) for name in self._declarations}
        ready = [(self._index[n], n) for n, count in pending.items() if count == 0]
        heapq.heapify(ready)

        order: list[ResourceDeclaration] = []
        while ready:
            _, name = heapq.heappop(ready)
            order.append(self._declarations[name])
            for dependent in self.dependents_of(name):
                pending[dependent] -= 1
                if pending[dependent] == 0:
                    heapq.heappush(ready, (self._index[dependent], dependent))

        if len(order) != len(self._declarations):
            remaining = [n for n, count in pending.items() if count > 0]
            raise DependencyCycleError(self._find_cycle(remaining))
        return order

    def _find_cycle(self, candidates: list[str]) -> list[str]:
        for name in candidates:
            for dependency in self.dependencies_of(name):
                path = self._path(dependency, name)
                if path is not None:
                    return [name, *path]
        return candidates

    def validate(self) -> None:
        """
        Re-check that every edge resolves and the graph is acyclic.

        Raises:
            DanglingReferenceError: If an edge points at an unknown resource
            DependencyCycleError: If the graph contains a cycle
        """
        for edge in self._edges:
            if edge.target not in self._declarations:
                raise DanglingReferenceError(edge.source, edge.target)
        self.topological_order()

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-compatible representation of the whole graph."""
        return {
            "resources": [d.to_dict() for d in self._declarations.values()],
            "edges": [e.to_dict() for e in self._edges],
        }

    def fingerprint(self) -> str:
        """SHA-256 of the canonical JSON form; equal graphs share it."""
        canonical = json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()

    def __len__(self) -> int:
        return len(self._declarations)

    def __iter__(self) -> Iterator[ResourceDeclaration]:
        return iter(self._declarations.values())

    def __contains__(self, name: str) -> bool:
        return name in self._declarations

    def __repr__(self) -> str:
        return f"TopologyGraph({len(self)} resources, {len(self._edges)} edges)"
