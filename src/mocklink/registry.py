"""Response registry — per-fingerprint queues of mocked responses."""

from __future__ import annotations

import copy
import json
import logging
import threading
from collections.abc import Iterator
from typing import Any

from mocklink.document import (
    add_typename_to_document,
    print_document,
    remove_client_sets_from_document,
    remove_connection_directive_from_document,
)
from mocklink.models import GraphQLRequest, MockedResponse, StaticResult

logger = logging.getLogger(__name__)


def request_to_key(request: GraphQLRequest, add_typename: bool = True) -> str:
    """Fingerprint *request* by its canonical query text.

    Variables are left out on purpose: mocks for the same operation share
    one queue and are told apart by their variables at match time.
    """
    document = request.query
    if add_typename:
        document = add_typename_to_document(document)
    return json.dumps({"query": print_document(document)})


def canonical_variables(variables: dict[str, Any] | None) -> str:
    """Serialize *variables* independently of key order.

    Integral floats compare equal to ints, as they do in JSON.
    """
    normalized = _normalize_numbers(variables or {})
    return json.dumps(normalized, sort_keys=True, default=str)


def _normalize_numbers(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, dict):
        return {k: _normalize_numbers(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalize_numbers(v) for v in value]
    return value


def normalize_mocked_response(mocked_response: MockedResponse) -> MockedResponse:
    """Return a copy with ``@connection`` and ``@client`` selections removed."""
    request = mocked_response.request.model_copy(deep=True)
    query = remove_connection_directive_from_document(request.query)
    stripped = remove_client_sets_from_document(query)
    request.query = stripped if stripped is not None else query

    result = mocked_response.result
    if isinstance(result, StaticResult):
        result = StaticResult(value=copy.deepcopy(result.value))
    return mocked_response.model_copy(update={"request": request, "result": result})


class ResponseRegistry:
    """Maps request fingerprints to ordered queues of mocked responses.

    Thread-safe: the scan-remove-regenerate sequence in :meth:`take` is
    serialized through a ``threading.Lock``.
    """

    def __init__(self, add_typename: bool = True) -> None:
        self._add_typename = add_typename
        self._queues: dict[str, list[MockedResponse]] = {}
        self._lock = threading.Lock()

    @property
    def add_typename(self) -> bool:
        return self._add_typename

    def fingerprint(self, request: GraphQLRequest) -> str:
        return request_to_key(request, self._add_typename)

    def register(self, mocked_response: MockedResponse) -> None:
        """Normalize *mocked_response* and append it to its queue."""
        normalized = normalize_mocked_response(mocked_response)
        key = self.fingerprint(normalized.request)
        with self._lock:
            self._queues.setdefault(key, []).append(normalized)
        logger.debug("Registered mocked response for %s", key)

    def lookup(self, key: str) -> list[MockedResponse]:
        """Return the live queue for *key* (empty if nothing was registered)."""
        return self._queues.get(key, [])

    def take(
        self, key: str, variables: dict[str, Any] | None
    ) -> MockedResponse | None:
        """Remove and return the first queued response matching *variables*.

        A response carrying ``new_data`` is replaced by a copy holding a
        fresh result, which goes back on the end of the same queue.  The
        returned response is never modified afterwards.  Returns ``None``
        when nothing in the queue matches.
        """
        wanted = canonical_variables(variables)
        with self._lock:
            queue = self._queues.get(key, [])
            index = next(
                (
                    i
                    for i, candidate in enumerate(queue)
                    if canonical_variables(candidate.request.variables) == wanted
                ),
                None,
            )
            if index is None:
                return None

            response = queue.pop(index)
            if response.new_data is not None:
                response = response.model_copy(
                    update={"result": StaticResult(value=response.new_data())}
                )
                queue.append(response)
                logger.debug("Regenerated mocked response for %s", key)
        return response

    def all_responses(self) -> Iterator[MockedResponse]:
        """Iterate over every queued response, queue by queue."""
        for queue in list(self._queues.values()):
            yield from list(queue)

    def keys(self) -> list[str]:
        return list(self._queues)

    def __len__(self) -> int:
        return sum(len(queue) for queue in self._queues.values())
