"""
Directed module graph.

Wraps a NetworkX DiGraph whose nodes carry one graph-node variant
each (file, component, utility or module) and whose edges are keyed
by a plain "from->to" string.
"""

from enum import Enum
from typing import Any, Callable, Dict, Generic, Iterator, List, Optional, Tuple, TypeVar

import networkx as nx

from ..core.entities import GraphNode, NodeType


N = TypeVar("N")


class EdgeType(Enum):
    """Types of edges between graph nodes."""
    IMPORTS = "IMPORTS"     # File imports a file or module
    CONTAINS = "CONTAINS"   # File declares a component or utility


class GraphIntegrityError(RuntimeError):
    """Raised when an edge would reference a node that does not exist."""


def edge_key(source: str, target: str) -> str:
    return f"{source}->{target}"


class ModuleGraph(Generic[N]):
    """
    Graph of keyed node variants.

    Nodes are stored under the "node" attribute of the underlying
    DiGraph. Adding a key that already exists merges into the stored
    node instead of replacing it.
    """

    def __init__(self):
        self._graph = nx.DiGraph()

    # ─── Node Operations ──────────────────────────

    def add_node(self, key: str, node: N) -> N:
        """Add a node, merging into the existing one for a known key."""
        if key in self._graph:
            existing = self._graph.nodes[key]["node"]
            if type(existing) is type(node):
                existing.merge(node)
                return existing
            # A real file always wins over a placeholder for the same path
            if getattr(existing, "type", None) != NodeType.MODULE:
                return existing
        self._graph.add_node(key, node=node)
        return node

    def has_node(self, key: str) -> bool:
        return key in self._graph

    def get_node(self, key: str) -> Optional[N]:
        if key in self._graph:
            return self._graph.nodes[key]["node"]
        return None

    def nodes(self) -> List[str]:
        return list(self._graph.nodes)

    def items(self) -> Iterator[Tuple[str, N]]:
        for key, data in self._graph.nodes(data=True):
            yield key, data["node"]

    def filter_nodes(self, predicate: Callable[[str, N], bool]) -> List[str]:
        return [key for key, node in self.items() if predicate(key, node)]

    def number_of_nodes(self) -> int:
        return self._graph.number_of_nodes()

    # ─── Edge Operations ──────────────────────────

    def add_edge(self, source: str, target: str, edge_type: EdgeType = EdgeType.IMPORTS, **attrs) -> str:
        """
        Add a directed edge between two existing nodes.

        Returns:
            The edge key "source->target"

        Raises:
            GraphIntegrityError: if either endpoint is missing
        """
        for endpoint in (source, target):
            if endpoint not in self._graph:
                raise GraphIntegrityError(
                    f"Cannot add edge {edge_key(source, target)}: node '{endpoint}' does not exist"
                )
        key = edge_key(source, target)
        self._graph.add_edge(source, target, key=key, type=edge_type.value, **attrs)
        return key

    def has_edge(self, source: str, target: str) -> bool:
        return self._graph.has_edge(source, target)

    def get_edge_data(self, source: str, target: str) -> Optional[Dict[str, Any]]:
        data = self._graph.get_edge_data(source, target)
        return dict(data) if data else None

    def edges(self) -> List[Tuple[str, str]]:
        return list(self._graph.edges)

    def edge_keys(self) -> List[str]:
        return [data["key"] for _, _, data in self._graph.edges(data=True)]

    def number_of_edges(self) -> int:
        return self._graph.number_of_edges()

    # ─── Traversal ────────────────────────────────

    def successors(self, key: str) -> List[str]:
        return list(self._graph.successors(key))

    def predecessors(self, key: str) -> List[str]:
        return list(self._graph.predecessors(key))

    def neighbors(self, key: str) -> List[str]:
        """Nodes adjacent in either direction, each listed once."""
        seen = dict.fromkeys(self._graph.successors(key))
        seen.update(dict.fromkeys(self._graph.predecessors(key)))
        return list(seen)

    # ─── Analysis ─────────────────────────────────

    def find_cycles(self) -> List[List[str]]:
        return list(nx.simple_cycles(self._graph))

    def density(self) -> float:
        if self._graph.number_of_nodes() == 0:
            return 0.0
        return nx.density(self._graph)

    def get_statistics(self) -> Dict:
        """Get graph statistics."""
        node_types: Dict[str, int] = {}
        for _, node in self.items():
            node_type = node.type.value
            node_types[node_type] = node_types.get(node_type, 0) + 1

        edge_types: Dict[str, int] = {}
        for _, _, data in self._graph.edges(data=True):
            edge_type = data.get("type", "unknown")
            edge_types[edge_type] = edge_types.get(edge_type, 0) + 1

        return {
            "nodes": self.number_of_nodes(),
            "edges": self.number_of_edges(),
            "density": self.density(),
            "node_types": node_types,
            "edge_types": edge_types
        }

    # ─── Serialization ────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to plain records; sets become sorted lists."""
        return {
            "nodes": [
                {"key": key, **node.to_dict()}
                for key, node in self.items()
            ],
            "edges": [
                {
                    "key": data["key"],
                    "source": source,
                    "target": target,
                    "type": data.get("type")
                }
                for source, target, data in self._graph.edges(data=True)
            ]
        }


# The graph produced by the builder
DependencyGraph = ModuleGraph[GraphNode]
