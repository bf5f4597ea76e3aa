"""Document rewrites applied before fingerprinting.

All transforms return a new document; the input is never modified.
"""

from __future__ import annotations

from typing import Any

from graphql import (
    DocumentNode,
    FieldNode,
    FragmentDefinitionNode,
    FragmentSpreadNode,
    NameNode,
    OperationDefinitionNode,
    SelectionSetNode,
)
from graphql.language import REMOVE, Visitor, visit
from graphql.utilities import get_operation_ast

from mocklink.constants import (
    CLIENT_DIRECTIVE,
    CONNECTION_DIRECTIVE,
    EXPORT_DIRECTIVE,
    TYPENAME_FIELD,
)


def _typename_field() -> FieldNode:
    return FieldNode(
        name=NameNode(value=TYPENAME_FIELD),
        arguments=(),
        directives=(),
    )


class _TypenameAdder(Visitor):
    def enter_selection_set(
        self, node: SelectionSetNode, _key: Any, parent: Any, *_args: Any
    ) -> SelectionSetNode | None:
        # Root fields of an operation never get a typename.
        if isinstance(parent, OperationDefinitionNode):
            return None
        # Already selected, or an introspection selection set.
        for selection in node.selections:
            if isinstance(selection, FieldNode) and selection.name.value.startswith(
                "__"
            ):
                return None
        # Exported selections feed variables and must stay as written.
        if isinstance(parent, FieldNode) and any(
            d.name.value == EXPORT_DIRECTIVE for d in parent.directives or ()
        ):
            return None
        return SelectionSetNode(selections=(*node.selections, _typename_field()))


class _DirectiveRemover(Visitor):
    def __init__(self, name: str) -> None:
        super().__init__()
        self._name = name

    def enter_directive(self, node: Any, *_args: Any) -> Any:
        if node.name.value == self._name:
            return REMOVE
        return None


class _ClientFieldRemover(Visitor):
    def enter_field(self, node: FieldNode, *_args: Any) -> Any:
        for directive in node.directives or ():
            if directive.name.value == CLIENT_DIRECTIVE:
                return REMOVE
        return None

    def leave_field(self, node: FieldNode, *_args: Any) -> Any:
        if node.selection_set is not None and not node.selection_set.selections:
            return REMOVE
        return None

    def leave_inline_fragment(self, node: Any, *_args: Any) -> Any:
        if not node.selection_set.selections:
            return REMOVE
        return None


def add_typename_to_document(document: DocumentNode) -> DocumentNode:
    """Add ``__typename`` to every selection set below the operation root.

    Idempotent: selection sets that already select ``__typename`` (or any
    other ``__``-prefixed introspection field) are left alone.
    """
    return visit(document, _TypenameAdder())


def remove_connection_directive_from_document(document: DocumentNode) -> DocumentNode:
    """Strip every ``@connection`` directive."""
    return visit(document, _DirectiveRemover(CONNECTION_DIRECTIVE))


def remove_client_sets_from_document(document: DocumentNode) -> DocumentNode | None:
    """Strip ``@client`` fields.

    Fields whose selection set ends up empty are dropped too.  Returns
    ``None`` when nothing is left to send to a server.
    """
    stripped = visit(document, _ClientFieldRemover())
    if _is_empty(stripped):
        return None
    return stripped


def _is_empty(document: DocumentNode) -> bool:
    operation = get_operation_ast(document, None)
    if operation is None:
        return False
    fragments = {
        d.name.value: d
        for d in document.definitions
        if isinstance(d, FragmentDefinitionNode)
    }
    return _selections_empty(operation.selection_set, fragments)


def _selections_empty(
    selection_set: SelectionSetNode | None,
    fragments: dict[str, FragmentDefinitionNode],
) -> bool:
    if selection_set is None:
        return True
    for selection in selection_set.selections:
        if not isinstance(selection, FragmentSpreadNode):
            return False
        fragment = fragments.get(selection.name.value)
        if fragment is not None and not _selections_empty(
            fragment.selection_set, fragments
        ):
            return False
    return True
