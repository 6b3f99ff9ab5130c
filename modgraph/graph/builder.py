"""
Dependency graph construction.

Builds the module graph in two phases:
1. Add every file together with the components and utilities it
   declares.
2. Once all files are known, link each file to the files and
   modules it imports.

Linking has to wait for phase 1 because an import's target file may
not have been visited yet.
"""

import os
from typing import Iterable, List, Optional

from ..core.entities import FileNode, ModuleNode, NodeType, SourceFile
from ..core.resolver import is_internal_specifier
from .module_graph import DependencyGraph, EdgeType, ModuleGraph


class DependencyGraphBuilder:
    """
    Assembles a DependencyGraph from per-file extraction results.

    All mutation happens on the calling thread; extraction results
    may be produced concurrently beforehand.
    """

    def __init__(
        self,
        root_dir: str,
        internal_packages: Optional[List[str]] = None,
        internal_package_prefix: Optional[str] = None,
        graph: Optional[DependencyGraph] = None,
        debug: bool = False
    ):
        self.root_dir = root_dir
        self.internal_packages = internal_packages or []
        self.internal_package_prefix = internal_package_prefix
        self.graph: DependencyGraph = graph if graph is not None else ModuleGraph()
        self.debug = debug

    def _log(self, message: str) -> None:
        if self.debug:
            print(message)

    # ─── Phase 1: nodes ───────────────────────────

    def add_source_file(self, source: SourceFile) -> FileNode:
        """Add a file node and its declarations, merging on re-add."""
        file_node = FileNode(
            name=os.path.basename(source.file_path),
            file_path=source.file_path,
            line_count=source.line_count,
            imports=list(source.imports),
            dependencies=list(source.dependencies)
        )
        file_node = self.graph.add_node(file_node.unique_id, file_node)

        for declaration in source.declarations:
            self.graph.add_node(declaration.unique_id, declaration)
            self.graph.add_edge(file_node.unique_id, declaration.unique_id, EdgeType.CONTAINS)
            self._log(f"  [{declaration.type.value.upper()}] {declaration.unique_id}")

        return file_node

    # ─── Phase 2: edges ───────────────────────────

    def _is_internal(self, specifier: str) -> bool:
        return is_internal_specifier(
            specifier,
            self.root_dir,
            self.internal_packages,
            self.internal_package_prefix
        )

    def link_file(self, file_key: str) -> int:
        """
        Draw import edges for one file.

        Returns:
            Number of edges drawn
        """
        file_node = self.graph.get_node(file_key)
        linked = 0

        for record in file_node.imports:
            if not self._is_internal(record.module_specifier):
                continue

            target_key = record.module_full_path
            target = self.graph.get_node(target_key) if target_key else None

            if target is None or target.type != NodeType.FILE:
                # No scanned file at the target: stand in a module node first
                target_key = record.module_full_path or record.module_specifier
                module_node = ModuleNode(
                    name=record.module_specifier,
                    file_path=target_key,
                    is_internal=True,
                    is_broken=record.is_relative and record.module_full_path is None
                )
                self.graph.add_node(target_key, module_node)
                if module_node.is_broken:
                    self._log(f"  [WARN] Unresolved import '{record.module_specifier}' in {file_key}")

            self.graph.add_edge(file_key, target_key, EdgeType.IMPORTS, line=record.line)
            linked += 1
            self._log(f"  [LINK] {file_key} -> {target_key}")

        return linked

    def link_dependencies(self) -> int:
        """Draw import edges for every file node in the graph."""
        file_keys = self.graph.filter_nodes(lambda _key, node: node.type == NodeType.FILE)
        return sum(self.link_file(key) for key in file_keys)

    def build(self, sources: Iterable[SourceFile]) -> DependencyGraph:
        """Run both phases over a set of extraction results."""
        count = 0
        for source in sources:
            self.add_source_file(source)
            count += 1

        self._log("[*] Building Links...")
        edges = self.link_dependencies()
        self._log(f"[INFO] Graph: {count} files, {edges} import edges")
        return self.graph


def build_dependency_graph(
    sources: Iterable[SourceFile],
    root_dir: str,
    internal_packages: Optional[List[str]] = None,
    internal_package_prefix: Optional[str] = None,
    debug: bool = False
) -> DependencyGraph:
    """
    Build a DependencyGraph from extraction results.

    Args:
        sources: SourceFile results, one per scanned file
        root_dir: Absolute scan root
        internal_packages: Package names treated as internal
        internal_package_prefix: Package prefix treated as internal
        debug: Print progress diagnostics

    Returns:
        Populated DependencyGraph
    """
    builder = DependencyGraphBuilder(
        root_dir,
        internal_packages=internal_packages,
        internal_package_prefix=internal_package_prefix,
        debug=debug
    )
    return builder.build(sources)
