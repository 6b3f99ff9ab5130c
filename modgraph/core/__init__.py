"""
Core module for modgraph source analysis.
"""

from .entities import (
    NodeType,
    ImportRecord,
    FileNode,
    ComponentNode,
    UtilityNode,
    ModuleNode,
    GraphNode,
    SourceFile
)

from .walk import (
    node_text,
    iter_preorder,
    find_first,
    contains_type,
    count_lines
)

from .resolver import (
    DEFAULT_EXTENSIONS,
    extract_imports,
    resolve_module_path,
    get_index_file_path,
    is_internal_specifier,
    get_internal_dependencies
)

from .components import extract_component_details

from .classifier import (
    is_component,
    classify_declaration,
    classify_declarations
)

from .parser import (
    parse_source,
    parse_file,
    language_for
)

__all__ = [
    # Entities
    "NodeType",
    "ImportRecord",
    "FileNode",
    "ComponentNode",
    "UtilityNode",
    "ModuleNode",
    "GraphNode",
    "SourceFile",
    # Walking
    "node_text",
    "iter_preorder",
    "find_first",
    "contains_type",
    "count_lines",
    # Resolver
    "DEFAULT_EXTENSIONS",
    "extract_imports",
    "resolve_module_path",
    "get_index_file_path",
    "is_internal_specifier",
    "get_internal_dependencies",
    # Components
    "extract_component_details",
    # Classifier
    "is_component",
    "classify_declaration",
    "classify_declarations",
    # Parser
    "parse_source",
    "parse_file",
    "language_for",
]
