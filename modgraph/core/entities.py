"""
Graph entity models for UI source analysis.

This module defines the node variants that make up the dependency
graph: files, components, utilities and placeholder modules, plus
the import records extracted from each file.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any, Set, Union
from enum import Enum


class NodeType(Enum):
    """Discriminant for the graph node variants."""
    FILE = "file"
    COMPONENT = "component"
    UTILITY = "utility"
    MODULE = "module"


@dataclass
class ImportRecord:
    """
    Represents one import statement.

    `import React, { useState as useS } from "react"` gives
    default_import="React", named_imports={"useState"}.
    """
    module_specifier: str
    module_full_path: Optional[str] = None   # None when not resolved on disk
    default_import: Optional[str] = None
    named_imports: Set[str] = field(default_factory=set)
    namespace_import: Optional[str] = None   # import * as ns
    line: int = 0
    is_type_only: bool = False               # import type { X }

    @property
    def is_relative(self) -> bool:
        return self.module_specifier.startswith(".") or self.module_specifier.startswith("/")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "module_specifier": self.module_specifier,
            "module_full_path": self.module_full_path,
            "default_import": self.default_import,
            "named_imports": sorted(self.named_imports),
            "namespace_import": self.namespace_import,
            "line": self.line,
            "is_type_only": self.is_type_only
        }


@dataclass
class FileNode:
    """
    One source file. Keyed by its absolute path.
    """
    name: str
    file_path: str
    line_count: int = 0
    imports: List[ImportRecord] = field(default_factory=list)
    dependencies: List[str] = field(default_factory=list)  # internal specifiers
    type: NodeType = field(default=NodeType.FILE, init=False)

    @property
    def unique_id(self) -> str:
        return self.file_path

    def merge(self, other: "FileNode") -> None:
        # A re-parse of the same file replaces its contents wholesale
        self.line_count = other.line_count
        self.imports = list(other.imports)
        self.dependencies = list(other.dependencies)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "name": self.name,
            "file_path": self.file_path,
            "unique_id": self.unique_id,
            "line_count": self.line_count,
            "imports": [i.to_dict() for i in self.imports],
            "dependencies": list(self.dependencies)
        }


@dataclass
class ComponentNode:
    """
    A declaration whose rendered output contains JSX.

    Captures the hooks it calls, the state it owns, the props it
    receives and the props it hands to child elements.
    """
    name: str
    file_path: str
    start_line: int = 0
    end_line: int = 0
    hooks: Set[str] = field(default_factory=set)
    state_variables: Set[str] = field(default_factory=set)
    state_setters: Set[str] = field(default_factory=set)
    incoming_props: Set[str] = field(default_factory=set)
    child_props: Set[str] = field(default_factory=set)
    type: NodeType = field(default=NodeType.COMPONENT, init=False)

    @property
    def unique_id(self) -> str:
        return f"{self.name}:{self.file_path}"

    def merge(self, other: "ComponentNode") -> None:
        self.start_line = self.start_line or other.start_line
        self.end_line = max(self.end_line, other.end_line)
        self.hooks |= other.hooks
        self.state_variables |= other.state_variables
        self.state_setters |= other.state_setters
        self.incoming_props |= other.incoming_props
        self.child_props |= other.child_props

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "name": self.name,
            "file_path": self.file_path,
            "unique_id": self.unique_id,
            "range": [self.start_line, self.end_line],
            "hooks": sorted(self.hooks),
            "state_variables": sorted(self.state_variables),
            "state_setters": sorted(self.state_setters),
            "incoming_props": sorted(self.incoming_props),
            "child_props": sorted(self.child_props)
        }


@dataclass
class UtilityNode:
    """A named declaration that does not render JSX."""
    name: str
    file_path: str
    start_line: int = 0
    end_line: int = 0
    type: NodeType = field(default=NodeType.UTILITY, init=False)

    @property
    def unique_id(self) -> str:
        return f"{self.name}:{self.file_path}"

    def merge(self, other: "UtilityNode") -> None:
        self.start_line = self.start_line or other.start_line
        self.end_line = max(self.end_line, other.end_line)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "name": self.name,
            "file_path": self.file_path,
            "unique_id": self.unique_id,
            "range": [self.start_line, self.end_line]
        }


@dataclass
class ModuleNode:
    """
    Placeholder for a dependency target with no matching FileNode.

    `file_path` is the resolved path when one is known, otherwise the
    raw specifier. `is_broken` marks a relative specifier that could
    not be found on disk, as opposed to an untracked package.
    """
    name: str
    file_path: str
    is_internal: bool = True
    is_broken: bool = False
    type: NodeType = field(default=NodeType.MODULE, init=False)

    @property
    def unique_id(self) -> str:
        return self.file_path

    def merge(self, other: "ModuleNode") -> None:
        self.is_internal = self.is_internal or other.is_internal
        self.is_broken = self.is_broken and other.is_broken

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "name": self.name,
            "file_path": self.file_path,
            "unique_id": self.unique_id,
            "is_internal": self.is_internal,
            "is_broken": self.is_broken
        }


GraphNode = Union[FileNode, ComponentNode, UtilityNode, ModuleNode]


@dataclass
class SourceFile:
    """
    Complete extraction result for a single source file.

    Produced independently per file so parsing can run in parallel;
    graph assembly consumes these afterwards.
    """
    file_path: str
    line_count: int = 0
    imports: List[ImportRecord] = field(default_factory=list)
    dependencies: List[str] = field(default_factory=list)
    declarations: List[GraphNode] = field(default_factory=list)

    # Parse status
    parse_success: bool = True
    parse_errors: List[str] = field(default_factory=list)
