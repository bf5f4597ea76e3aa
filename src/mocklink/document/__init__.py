"""GraphQL document helpers — printing, classification, and transforms."""

from mocklink.document.printer import (
    OperationKind,
    operation_kind,
    operation_name,
    parse_document,
    print_document,
)
from mocklink.document.transform import (
    add_typename_to_document,
    remove_client_sets_from_document,
    remove_connection_directive_from_document,
)

__all__ = [
    "OperationKind",
    "add_typename_to_document",
    "operation_kind",
    "operation_name",
    "parse_document",
    "print_document",
    "remove_client_sets_from_document",
    "remove_connection_directive_from_document",
]
