"""
TypeScript / JavaScript source parser using tree-sitter.

This module parses UI source files and assembles the per-file
extraction result: line counts, import records, internal
dependencies and classified declarations.
"""

import os
import threading
from typing import List, Optional
from tree_sitter_language_pack import get_parser

from .entities import SourceFile
from .walk import count_lines
from .resolver import extract_imports, get_internal_dependencies, DEFAULT_EXTENSIONS
from .classifier import classify_declarations


# --- PARSER SETUP ---
# Grammar per file extension; .tsx needs the JSX-aware TypeScript grammar
LANGUAGE_BY_EXTENSION = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
}

# tree-sitter parsers are not safe to share between threads
_local = threading.local()


def language_for(file_path: str) -> str:
    """Pick the grammar for a file, defaulting to tsx."""
    _, ext = os.path.splitext(file_path)
    return LANGUAGE_BY_EXTENSION.get(ext.lower(), "tsx")


def _get_parser(language: str):
    parsers = getattr(_local, "parsers", None)
    if parsers is None:
        parsers = _local.parsers = {}
    if language not in parsers:
        parsers[language] = get_parser(language)
    return parsers[language]


def parse_source(code: str, language: str = "tsx"):
    """
    Parse source text into a tree-sitter tree.

    Args:
        code: Source text
        language: Grammar name ("tsx", "typescript", "javascript")

    Returns:
        tree_sitter.Tree
    """
    return _get_parser(language).parse(bytes(code, "utf8"))


def parse_file(
    file_path: str,
    root_dir: str,
    possible_extensions: Optional[List[str]] = None,
    internal_packages: Optional[List[str]] = None,
    internal_package_prefix: Optional[str] = None
) -> SourceFile:
    """
    Parse one source file and extract everything the graph needs.

    Args:
        file_path: Absolute path to the source file
        root_dir: Absolute scan root, used to classify internal imports
        possible_extensions: Ordered extensions tried during resolution
        internal_packages: Package names treated as internal
        internal_package_prefix: Package prefix treated as internal

    Returns:
        SourceFile with the extraction result. Read failures are
        reported through parse_success / parse_errors.
    """
    try:
        with open(file_path, "r", encoding="utf8") as f:
            code = f.read()
    except (OSError, UnicodeDecodeError) as e:
        return SourceFile(
            file_path=file_path,
            parse_success=False,
            parse_errors=[str(e)]
        )

    tree = parse_source(code, language_for(file_path))
    root_node = tree.root_node

    result = SourceFile(file_path=file_path)
    result.line_count = count_lines(code)

    if root_node.has_error:
        # tree-sitter recovers from syntax errors; keep going with what parsed
        result.parse_errors.append("syntax errors present")

    result.imports = extract_imports(
        root_node,
        file_path,
        possible_extensions or DEFAULT_EXTENSIONS
    )
    result.dependencies = get_internal_dependencies(
        result.imports,
        root_dir,
        internal_packages or [],
        internal_package_prefix
    )
    result.declarations = classify_declarations(root_node, file_path)

    return result
