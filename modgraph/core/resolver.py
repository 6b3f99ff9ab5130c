"""
Import extraction and module resolution.

This module turns import statements into ImportRecords and maps
relative specifiers onto files on disk, accounting for:
- Directory imports resolved through index files
- Extensionless specifiers ("./Button" -> "./Button.tsx")
- Default, named, namespace and `import x = require()` bindings

It also decides which specifiers count as internal to the scanned
codebase.
"""

import os
from typing import List, Optional

from .entities import ImportRecord
from .walk import node_text


DEFAULT_EXTENSIONS = [".ts", ".tsx", ".js", ".jsx"]


def _strip_quotes(text: str) -> str:
    if len(text) >= 2 and text[0] in "\"'`" and text[-1] == text[0]:
        return text[1:-1]
    return text


def is_directory(path: str) -> bool:
    return os.path.isdir(path)


def get_index_file_path(path: str, possible_extensions: List[str] = None) -> Optional[str]:
    """Find `index<ext>` inside a directory, trying extensions in order."""
    for ext in possible_extensions or DEFAULT_EXTENSIONS:
        index_file_path = os.path.join(path, f"index{ext}")
        if os.path.isfile(index_file_path):
            return index_file_path
    return None


def resolve_module_path(
    specifier: str,
    from_file: str,
    possible_extensions: List[str] = None
) -> Optional[str]:
    """
    Resolve a relative or rooted specifier to an absolute path.

    Args:
        specifier: Raw module specifier from the import statement
        from_file: Absolute path of the importing file
        possible_extensions: Ordered extensions for index files and
                             extensionless specifiers

    Returns:
        Absolute path of the target, or None if nothing on disk matches.
        Bare package specifiers always return None.
    """
    if not (specifier.startswith(".") or specifier.startswith("/")):
        return None

    extensions = possible_extensions or DEFAULT_EXTENSIONS
    base_dir = os.path.dirname(from_file)
    resolved = os.path.normpath(os.path.join(base_dir, specifier))

    if is_directory(resolved):
        index_file = get_index_file_path(resolved, extensions)
        if index_file:
            resolved = index_file

    # Existing paths win, including directories without an index file
    if os.path.exists(resolved):
        return resolved

    for ext in extensions:
        candidate = resolved + ext
        if os.path.isfile(candidate):
            return candidate

    return None


def _extract_clause(clause, record: ImportRecord) -> None:
    """Fill bindings from an import_clause node."""
    for child in clause.children:
        if child.type == "identifier":
            record.default_import = node_text(child)

        elif child.type == "named_imports":
            for spec in child.children:
                if spec.type != "import_specifier":
                    continue
                name_node = spec.child_by_field_name("name")
                if name_node is None:
                    # Grammar versions without field names
                    name_node = next(
                        (c for c in spec.children if c.type in ("identifier", "string")),
                        None
                    )
                if name_node is not None:
                    record.named_imports.add(_strip_quotes(node_text(name_node)))

        elif child.type == "namespace_import":
            for sub in child.children:
                if sub.type == "identifier":
                    record.namespace_import = node_text(sub)


def extract_import(node, file_path: str, possible_extensions: List[str] = None) -> Optional[ImportRecord]:
    """
    Extract an ImportRecord from an import_statement node.

    Returns None for statements without a module specifier.
    """
    if node.type != "import_statement":
        return None

    source_node = node.child_by_field_name("source")
    require_clause = None
    for child in node.children:
        if child.type == "import_require_clause":
            require_clause = child
            if source_node is None:
                source_node = child.child_by_field_name("source") or next(
                    (c for c in child.children if c.type == "string"), None
                )

    if source_node is None:
        return None

    specifier = _strip_quotes(node_text(source_node))
    record = ImportRecord(
        module_specifier=specifier,
        line=node.start_point[0] + 1,
        is_type_only=any(c.type == "type" for c in node.children)
    )

    for child in node.children:
        if child.type == "import_clause":
            _extract_clause(child, record)

    if require_clause is not None:
        # import fs = require("fs")
        for child in require_clause.children:
            if child.type == "identifier":
                record.default_import = node_text(child)
                break

    record.module_full_path = resolve_module_path(specifier, file_path, possible_extensions)
    return record


def extract_imports(root_node, file_path: str, possible_extensions: List[str] = None) -> List[ImportRecord]:
    """
    Extract all import records of a file in source order.

    Args:
        root_node: tree-sitter program node
        file_path: Absolute path of the file being parsed
        possible_extensions: Ordered resolution extensions

    Returns:
        ImportRecords in source order; duplicate imports are kept
    """
    imports = []
    for child in root_node.children:
        if child.type == "import_statement":
            record = extract_import(child, file_path, possible_extensions)
            if record:
                imports.append(record)
    return imports


def is_internal_specifier(
    specifier: str,
    root_dir: str,
    internal_packages: List[str] = None,
    internal_package_prefix: Optional[str] = None
) -> bool:
    """
    Decide whether a specifier points inside the scanned codebase.

    Internal means relative, rooted at the scan root, listed in
    `internal_packages` (exact match) or under `internal_package_prefix`
    (e.g. "@company").
    """
    if specifier.startswith("."):
        return True
    if root_dir and specifier.startswith(root_dir):
        return True
    if internal_packages and specifier in internal_packages:
        return True
    if internal_package_prefix and specifier.startswith(internal_package_prefix):
        return True
    return False


def get_internal_dependencies(
    imports: List[ImportRecord],
    root_dir: str,
    internal_packages: List[str] = None,
    internal_package_prefix: Optional[str] = None
) -> List[str]:
    """Return the specifiers of all internal imports, in import order."""
    return [
        imp.module_specifier
        for imp in imports
        if is_internal_specifier(
            imp.module_specifier, root_dir, internal_packages, internal_package_prefix
        )
    ]
