"""
Component detail extraction.

Collects hooks, state variables, incoming props and child props from
a declaration already classified as a Component.
"""

from typing import Dict, List, Set

from .walk import CLASS_TYPES, node_text, iter_preorder


PARAMETER_TYPES = {"required_parameter", "optional_parameter"}


def _pattern_elements(array_pattern) -> List:
    """Elements of an array pattern by position; holes are None."""
    elements = [None]
    for child in array_pattern.children:
        if child.type == ",":
            elements.append(None)
        elif child.type in ("[", "]") or child.type == "comment":
            continue
        else:
            elements[-1] = child
    return elements


def get_hook_name(call_node) -> str:
    """
    Return the hook name for a call expression, or "" if not a hook.

    `useEffect(...)` gives "useEffect"; `React.useState(...)` gives
    "React.useState".
    """
    callee = call_node.child_by_field_name("function")
    if callee is None:
        return ""

    if callee.type == "identifier":
        text = node_text(callee)
        return text if text.startswith("use") else ""

    if callee.type == "member_expression":
        obj = callee.child_by_field_name("object")
        prop = callee.child_by_field_name("property")
        if obj is not None and prop is not None and obj.type == "identifier":
            if node_text(prop).startswith("use"):
                return node_text(callee)

    return ""


def get_state_bindings(declarator):
    """
    Return (state_name, setter_name) for `const [x, setX] = useState()`.

    Either entry may be None. Non-matching declarators give (None, None).
    """
    value = declarator.child_by_field_name("value")
    name = declarator.child_by_field_name("name")
    if value is None or name is None:
        return None, None
    if value.type != "call_expression" or name.type != "array_pattern":
        return None, None

    callee = value.child_by_field_name("function")
    if callee is None or callee.type != "identifier" or node_text(callee) != "useState":
        return None, None

    elements = _pattern_elements(name)
    state = elements[0] if len(elements) > 0 else None
    setter = elements[1] if len(elements) > 1 else None

    state_name = node_text(state) if state is not None and state.type == "identifier" else None
    setter_name = node_text(setter) if setter is not None and setter.type == "identifier" else None
    return state_name, setter_name


def get_incoming_props(function_node) -> Set[str]:
    """
    Property names of the first parameter's inline object type.

    `function Card({ title }: { title: string; onClick(): void })`
    gives {"title", "onClick"}. Named or missing types give an empty set.
    """
    props = set()

    if function_node.type in CLASS_TYPES:
        return props

    params = function_node.child_by_field_name("parameters")
    if params is None:
        return props

    first = next((c for c in params.named_children if c.type != "comment"), None)
    if first is None or first.type not in PARAMETER_TYPES:
        return props

    annotation = first.child_by_field_name("type")
    if annotation is None:
        return props

    # type_annotation wraps the actual type node
    type_node = annotation
    if annotation.type == "type_annotation":
        type_node = next((c for c in annotation.named_children), None)
    if type_node is None or type_node.type != "object_type":
        return props

    for member in type_node.named_children:
        if member.type not in ("property_signature", "method_signature"):
            continue
        name_node = member.child_by_field_name("name")
        if name_node is not None and name_node.type == "property_identifier":
            props.add(node_text(name_node))

    return props


def extract_component_details(declaration_node, function_node) -> Dict[str, Set[str]]:
    """
    Extract component details in one depth-first pass.

    Args:
        declaration_node: The whole declaration (function, class or
                          variable declarator)
        function_node: The function or class carrying the parameters

    Returns:
        Dict with 'hooks', 'state_variables', 'state_setters',
        'incoming_props' and 'child_props' sets
    """
    hooks = set()
    state_variables = set()
    state_setters = set()
    child_props = set()

    for node in iter_preorder(declaration_node):
        if node.type == "jsx_attribute":
            name_node = node.named_children[0] if node.named_child_count > 0 else None
            if name_node is not None:
                child_props.add(node_text(name_node))

        elif node.type == "call_expression":
            hook = get_hook_name(node)
            if hook:
                hooks.add(hook)

        elif node.type == "variable_declarator":
            state_name, setter_name = get_state_bindings(node)
            if state_name:
                state_variables.add(state_name)
            if setter_name:
                state_setters.add(setter_name)

    return {
        "hooks": hooks,
        "state_variables": state_variables,
        "state_setters": state_setters,
        "incoming_props": get_incoming_props(function_node),
        "child_props": child_props
    }
