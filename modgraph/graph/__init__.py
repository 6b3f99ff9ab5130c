"""
Graph module - module graph structure and dependency graph assembly.
"""

from .module_graph import (
    EdgeType,
    GraphIntegrityError,
    ModuleGraph,
    DependencyGraph,
    edge_key
)

from .builder import (
    DependencyGraphBuilder,
    build_dependency_graph
)

__all__ = [
    # Graph
    "EdgeType",
    "GraphIntegrityError",
    "ModuleGraph",
    "DependencyGraph",
    "edge_key",
    # Builder
    "DependencyGraphBuilder",
    "build_dependency_graph",
]
