"""Human-readable rendering and diffs for unmatched requests."""

from __future__ import annotations

import difflib
import json
from collections.abc import Iterable
from dataclasses import dataclass

from mocklink.document import (
    add_typename_to_document,
    operation_kind,
    print_document,
)
from mocklink.models import GraphQLRequest

_DIFF_HEADER = "- Expected\n+ Received\n\n"


@dataclass(frozen=True)
class RenderableRequest:
    """A request reduced to the three parts shown in diagnostics."""

    operation: str
    query: str
    variables: str

    @classmethod
    def from_request(
        cls, request: GraphQLRequest, add_typename: bool = False
    ) -> RenderableRequest:
        document = request.query
        if add_typename:
            document = add_typename_to_document(document)
        variables = (
            json.dumps(request.variables, indent=2, default=str)
            if request.variables
            else "{}"
        )
        return cls(
            operation=operation_kind(request.query),
            query=print_document(document),
            variables=variables,
        )

    def render(self) -> str:
        return f"{self.operation}:\n{self.query}\nvariables:\n{self.variables}"


def request_to_string(request: GraphQLRequest, add_typename: bool = False) -> str:
    return RenderableRequest.from_request(request, add_typename).render()


def text_diff(expected: str, received: str) -> str:
    """Line diff of two texts, or ``""`` when they are equal."""
    if expected == received:
        return ""
    lines = [
        line
        for line in difflib.ndiff(expected.splitlines(), received.splitlines())
        if not line.startswith("? ")
    ]
    return _DIFF_HEADER + "\n".join(lines)


def diff_request(
    mocked: GraphQLRequest,
    incoming: GraphQLRequest,
    add_typename: bool = False,
) -> str:
    """Diff a registered request against an incoming one.

    Only the mocked side gets ``__typename`` injected; the incoming side is
    rendered as received.
    """
    return text_diff(
        request_to_string(mocked, add_typename),
        request_to_string(incoming),
    )


def no_match_message(
    incoming: GraphQLRequest,
    candidates: Iterable[GraphQLRequest],
    add_typename: bool = False,
) -> str:
    """Build the error text for a request nothing was registered for."""
    diffs = [diff_request(c, incoming, add_typename) for c in candidates]
    diffs = [d for d in diffs if d]
    msg = f"No more mocked responses for {request_to_string(incoming)}"
    if diffs:
        msg += "\n\nPossible matches:\n" + "\n".join(diffs)
    return msg
