"""Parse, print, and classify GraphQL documents."""

from __future__ import annotations

from typing import Literal

from graphql import DocumentNode, parse, print_ast
from graphql.utilities import get_operation_ast

OperationKind = Literal["query", "mutation", "subscription"]


def parse_document(source: str) -> DocumentNode:
    """Parse *source* into a document (raises ``GraphQLSyntaxError``)."""
    return parse(source)


def print_document(document: DocumentNode) -> str:
    """Return the canonical, whitespace-normalized text of *document*."""
    return print_ast(document)


def operation_kind(document: DocumentNode) -> OperationKind:
    """Return the kind of the document's operation.

    Falls back to ``"query"`` when the document holds no operation or
    more than one.
    """
    operation = get_operation_ast(document, None)
    if operation is None:
        return "query"
    return operation.operation.value  # type: ignore[return-value]


def operation_name(document: DocumentNode) -> str | None:
    """Return the name of the document's operation, if it has one."""
    operation = get_operation_ast(document, None)
    if operation is None or operation.name is None:
        return None
    return operation.name.value
