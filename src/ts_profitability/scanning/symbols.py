"""TypeScript symbol source: tree-sitter parse tree -> SymbolNode tree.

The tree mirrors an editor outline. Module-level declarations (classes,
interfaces, enums, functions, variables, namespaces, type aliases) are
top-level symbols, and members nest below their owner. Inside function and
method bodies only nested functions and classes are reported; plain local
variables are not.

Mapping:
    class / abstract class / class expression   -> CLASS
    method_definition "constructor"             -> CONSTRUCTOR
    method_definition get/set accessor          -> PROPERTY
    method_definition / method signatures       -> METHOD
    field definition / property signature       -> PROPERTY
    interface                                   -> INTERFACE
    enum / enum member                          -> ENUM / ENUM_MEMBER
    function declaration / function-valued var  -> FUNCTION
    namespace / module                          -> MODULE
    type alias                                  -> TYPE_PARAMETER
    const / let, var                            -> CONSTANT / VARIABLE
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from ..exceptions import FileAccessError
from ..logging_config import get_logger
from ..models import SymbolKind, SymbolNode
from .treesitter_parser import TreeSitterParser

logger = get_logger(__name__)

_WRAPPER_TYPES = frozenset({"export_statement", "ambient_declaration", "expression_statement"})
_CLASS_TYPES = frozenset({"class_declaration", "abstract_class_declaration", "class"})
_FUNCTION_DECLARATION_TYPES = frozenset(
    {"function_declaration", "generator_function_declaration", "function_signature"}
)
_FUNCTION_VALUE_TYPES = frozenset(
    {"arrow_function", "function_expression", "function", "generator_function"}
)
_MODULE_TYPES = frozenset({"internal_module", "module"})
_ACCESSOR_TOKENS = frozenset({"get", "set"})
_DECLARATION_TYPES = (
    _CLASS_TYPES
    | _FUNCTION_DECLARATION_TYPES
    | _MODULE_TYPES
    | {
        "interface_declaration",
        "enum_declaration",
        "type_alias_declaration",
        "lexical_declaration",
        "variable_declaration",
    }
)


class TreeSitterSymbolSource:
    """Symbol source for ``.ts``/``.tsx`` files under a project root."""

    def __init__(self, root: Path, parser: Optional[TreeSitterParser] = None) -> None:
        self.root = Path(root)
        self._parser = parser or TreeSitterParser()

    def get_symbols(self, path: str) -> list[SymbolNode]:
        full_path = self.root / path
        try:
            tree = self._parser.parse_file(full_path)
        except OSError as e:
            raise FileAccessError(full_path, f"Cannot read file: {e}")
        if tree is None:
            return []
        return symbols_from_tree(tree.root_node)


def symbols_from_tree(root_node: Any) -> list[SymbolNode]:
    """Outline symbols for a parsed program node."""
    return _declarations(root_node, top_level=True)


def _text(node: Optional[Any], default: str = "<anonymous>") -> str:
    if node is None or node.text is None:
        return default
    return node.text.decode("utf-8", errors="replace")


def _declarations(node: Any, top_level: bool) -> list[SymbolNode]:
    """Declarations below ``node`` in source order.

    Statements and expressions are searched with an explicit stack, so deeply
    nested expressions cost no Python frames. Only declarations nested inside
    other declarations recurse.
    """
    symbols: list[SymbolNode] = []
    stack = list(reversed(node.named_children))
    while stack:
        child = stack.pop()
        if child.type in _WRAPPER_TYPES or (not top_level and child.type not in _DECLARATION_TYPES):
            stack.extend(reversed(child.named_children))
            continue
        symbols.extend(_symbols_for(child, top_level))
    return symbols


def _symbols_for(node: Any, top_level: bool) -> list[SymbolNode]:
    node_type = node.type

    if node_type in _CLASS_TYPES:
        name = _text(node.child_by_field_name("name"), default="default")
        return [SymbolNode(SymbolKind.CLASS, name, _class_members(node.child_by_field_name("body")))]

    if node_type == "interface_declaration":
        name = _text(node.child_by_field_name("name"))
        return [SymbolNode(SymbolKind.INTERFACE, name, _signature_members(node.child_by_field_name("body")))]

    if node_type == "enum_declaration":
        name = _text(node.child_by_field_name("name"))
        return [SymbolNode(SymbolKind.ENUM, name, _enum_members(node.child_by_field_name("body")))]

    if node_type in _FUNCTION_DECLARATION_TYPES:
        name = _text(node.child_by_field_name("name"), default="default")
        return [SymbolNode(SymbolKind.FUNCTION, name, _body_children(node))]

    if node_type in _MODULE_TYPES:
        name = _text(node.child_by_field_name("name"))
        body = node.child_by_field_name("body")
        children = tuple(_declarations(body, top_level=True)) if body is not None else ()
        return [SymbolNode(SymbolKind.MODULE, name, children)]

    if node_type == "type_alias_declaration":
        return [SymbolNode(SymbolKind.TYPE_PARAMETER, _text(node.child_by_field_name("name")))]

    if node_type in ("lexical_declaration", "variable_declaration"):
        return _variables(node, top_level)

    return []


def _body_children(node: Any) -> tuple[SymbolNode, ...]:
    body = node.child_by_field_name("body")
    if body is None:
        return ()
    return tuple(_declarations(body, top_level=False))


def _class_members(body: Optional[Any]) -> tuple[SymbolNode, ...]:
    if body is None:
        return ()
    members: list[SymbolNode] = []
    for member in body.named_children:
        member_type = member.type
        if member_type == "method_definition":
            name = _text(member.child_by_field_name("name"))
            if name == "constructor":
                kind = SymbolKind.CONSTRUCTOR
            elif any(child.type in _ACCESSOR_TOKENS for child in member.children):
                kind = SymbolKind.PROPERTY
            else:
                kind = SymbolKind.METHOD
            members.append(SymbolNode(kind, name, _body_children(member)))
        elif member_type in ("method_signature", "abstract_method_signature"):
            members.append(SymbolNode(SymbolKind.METHOD, _text(member.child_by_field_name("name"))))
        elif member_type in ("public_field_definition", "property_signature"):
            members.append(
                SymbolNode(
                    SymbolKind.PROPERTY,
                    _text(member.child_by_field_name("name")),
                    _value_children(member.child_by_field_name("value")),
                )
            )
    return tuple(members)


def _signature_members(body: Optional[Any]) -> tuple[SymbolNode, ...]:
    if body is None:
        return ()
    members: list[SymbolNode] = []
    for member in body.named_children:
        if member.type == "property_signature":
            members.append(SymbolNode(SymbolKind.PROPERTY, _text(member.child_by_field_name("name"))))
        elif member.type == "method_signature":
            members.append(SymbolNode(SymbolKind.METHOD, _text(member.child_by_field_name("name"))))
    return tuple(members)


def _enum_members(body: Optional[Any]) -> tuple[SymbolNode, ...]:
    if body is None:
        return ()
    members: list[SymbolNode] = []
    for member in body.named_children:
        if member.type == "enum_assignment":
            members.append(SymbolNode(SymbolKind.ENUM_MEMBER, _text(member.child_by_field_name("name"))))
        elif member.type in ("property_identifier", "string"):
            members.append(SymbolNode(SymbolKind.ENUM_MEMBER, _text(member)))
    return tuple(members)


def _value_children(value: Optional[Any]) -> tuple[SymbolNode, ...]:
    """Nested declarations inside a field initializer."""
    if value is None:
        return ()
    if value.type in _FUNCTION_VALUE_TYPES:
        return _body_children(value)
    return tuple(_declarations(value, top_level=False))


def _variables(node: Any, top_level: bool) -> list[SymbolNode]:
    is_const = bool(node.children) and node.children[0].type == "const"
    symbols: list[SymbolNode] = []
    for declarator in node.named_children:
        if declarator.type != "variable_declarator":
            continue
        name_node = declarator.child_by_field_name("name")
        value = declarator.child_by_field_name("value")

        # destructuring patterns have no single name
        if name_node is None or name_node.type != "identifier":
            if value is not None and not top_level:
                symbols.extend(_declarations(value, top_level=False))
            continue

        name = _text(name_node)
        if value is not None and value.type in _FUNCTION_VALUE_TYPES:
            symbols.append(SymbolNode(SymbolKind.FUNCTION, name, _body_children(value)))
        elif value is not None and value.type == "class":
            symbols.append(SymbolNode(SymbolKind.CLASS, name, _class_members(value.child_by_field_name("body"))))
        elif not top_level:
            if value is not None:
                symbols.extend(_declarations(value, top_level=False))
        else:
            kind = SymbolKind.CONSTANT if is_const else SymbolKind.VARIABLE
            symbols.append(SymbolNode(kind, name, _object_members(value)))
    return symbols


def _object_members(value: Optional[Any]) -> tuple[SymbolNode, ...]:
    if value is None or value.type != "object":
        return ()
    members: list[SymbolNode] = []
    for member in value.named_children:
        if member.type == "pair":
            inner = member.child_by_field_name("value")
            kind = SymbolKind.METHOD if inner is not None and inner.type in _FUNCTION_VALUE_TYPES else SymbolKind.PROPERTY
            members.append(SymbolNode(kind, _text(member.child_by_field_name("key")), _value_children(inner)))
        elif member.type == "method_definition":
            members.append(SymbolNode(SymbolKind.METHOD, _text(member.child_by_field_name("name")), _body_children(member)))
        elif member.type == "shorthand_property_identifier":
            members.append(SymbolNode(SymbolKind.PROPERTY, _text(member)))
    return tuple(members)
