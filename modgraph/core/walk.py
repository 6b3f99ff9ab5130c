"""
Syntax tree walking helpers.

Traversal here uses an explicit stack instead of recursion so that
deeply nested JSX or callback chains cannot exhaust the interpreter
stack. Results are returned by value.
"""

from typing import Callable, Iterable, Iterator, Optional


# Node types that open a new function scope
FUNCTION_TYPES = {
    "function_declaration",
    "generator_function_declaration",
    "function_expression",
    "function",               # older grammars name function expressions "function"
    "generator_function",
    "arrow_function",
    "method_definition",
}

CLASS_TYPES = {
    "class_declaration",
    "abstract_class_declaration",
    "class",
}

JSX_TYPES = {
    "jsx_element",
    "jsx_self_closing_element",
}


def node_text(node) -> str:
    """Decode the source text covered by a tree-sitter node."""
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf8")


def iter_preorder(node, descend: Optional[Callable] = None) -> Iterator:
    """
    Yield `node` and its descendants in depth-first pre-order.

    Args:
        node: Root tree-sitter node
        descend: Optional predicate; children of a non-root node are
                 only visited when descend(node) is true

    Yields:
        tree-sitter nodes, root first
    """
    if node is None:
        return
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        if current is not node and descend is not None and not descend(current):
            continue
        # Reverse so the leftmost child is popped first
        stack.extend(reversed(current.children))


def find_first(node, types: Iterable[str], descend: Optional[Callable] = None):
    """Return the first pre-order descendant (or node itself) of one of `types`."""
    wanted = set(types)
    for current in iter_preorder(node, descend):
        if current.type in wanted:
            return current
    return None


def contains_type(node, types: Iterable[str]) -> bool:
    """Check whether any node in the subtree has one of `types`."""
    return find_first(node, types) is not None


def outside_functions(node) -> bool:
    """Descend predicate: do not enter nested function scopes."""
    return node.type not in FUNCTION_TYPES


def count_lines(source_code: str) -> int:
    """
    Count the lines of a source file.

    A trailing newline does not start another line.
    """
    if not source_code:
        return 0
    lines = source_code.split('\n')
    if lines[-1] == "":
        lines.pop()
    return len(lines)
