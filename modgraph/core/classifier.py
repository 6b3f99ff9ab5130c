"""
Declaration classification.

Finds every named declaration in a file and classifies it as a
Component (renders JSX) or a Utility (anything else).
"""

from typing import List, Optional, Tuple

from .entities import ComponentNode, UtilityNode, GraphNode
from .walk import (
    FUNCTION_TYPES, CLASS_TYPES, JSX_TYPES,
    node_text, iter_preorder, find_first, contains_type, outside_functions
)
from .components import extract_component_details


FUNCTION_DECLARATION_TYPES = {"function_declaration", "generator_function_declaration"}

# Initializers that make a variable declarator a candidate
FUNCTION_INITIALIZER_TYPES = {"arrow_function", "function_expression", "function", "generator_function"}


def get_candidate(node) -> Optional[Tuple[str, object]]:
    """
    Check whether a node is a named declaration worth classifying.

    Returns:
        (name, function_node) for candidates, None otherwise. For
        classes the function node is the class itself.
    """
    if node.type in FUNCTION_DECLARATION_TYPES or node.type in CLASS_TYPES:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            return None
        return node_text(name_node), node

    if node.type == "variable_declarator":
        name_node = node.child_by_field_name("name")
        value_node = node.child_by_field_name("value")
        if name_node is None or value_node is None:
            return None
        # Destructuring patterns have no single name
        if name_node.type != "identifier":
            return None
        if value_node.type not in FUNCTION_INITIALIZER_TYPES:
            return None
        return node_text(name_node), value_node

    return None


def _in_class_scope(node) -> bool:
    # Class methods are entered, nested callbacks are not
    return node.type == "method_definition" or node.type not in FUNCTION_TYPES


def find_rendered_subtree(function_node):
    """
    Locate the subtree whose contents decide the classification.

    That is the first reachable return statement, or the expression
    body of an arrow function. Nested functions are not searched.
    """
    if function_node.type in CLASS_TYPES:
        body = function_node.child_by_field_name("body")
        return find_first(body, ["return_statement"], _in_class_scope)

    body = function_node.child_by_field_name("body")
    if body is None:
        return None

    if function_node.type == "arrow_function" and body.type != "statement_block":
        return body

    return find_first(body, ["return_statement"], outside_functions)


def is_component(function_node) -> bool:
    """A declaration is a Component iff its rendered subtree holds JSX."""
    subtree = find_rendered_subtree(function_node)
    if subtree is None:
        return False
    return contains_type(subtree, JSX_TYPES)


def classify_declaration(node, file_path: str) -> Optional[GraphNode]:
    """
    Classify a single syntax node.

    Returns:
        ComponentNode or UtilityNode for named declarations, else None
    """
    candidate = get_candidate(node)
    if candidate is None:
        return None

    name, function_node = candidate
    start_line = node.start_point[0] + 1
    end_line = node.end_point[0] + 1

    if not is_component(function_node):
        return UtilityNode(
            name=name,
            file_path=file_path,
            start_line=start_line,
            end_line=end_line
        )

    details = extract_component_details(node, function_node)
    return ComponentNode(
        name=name,
        file_path=file_path,
        start_line=start_line,
        end_line=end_line,
        hooks=details["hooks"],
        state_variables=details["state_variables"],
        state_setters=details["state_setters"],
        incoming_props=details["incoming_props"],
        child_props=details["child_props"]
    )


def classify_declarations(root_node, file_path: str) -> List[GraphNode]:
    """
    Classify every named declaration in a file, in source order.

    Nested declarations (a helper defined inside a component, say)
    are classified as well.
    """
    declarations = []
    for node in iter_preorder(root_node):
        declaration = classify_declaration(node, file_path)
        if declaration is not None:
            declarations.append(declaration)
    return declarations
