"""MockLink — replays registered responses in place of a network link."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import Any

from mocklink.constants import FetchResult
from mocklink.diagnostics import no_match_message
from mocklink.models import GraphQLRequest, MockedResponse, ResultSource
from mocklink.observable import Observable, SubscriptionObserver, Teardown
from mocklink.registry import ResponseRegistry

logger = logging.getLogger(__name__)


class MockLinkError(Exception):
    """Base class for errors raised by a mis-used or mis-configured link."""


class NoMatchError(MockLinkError):
    """Raised when no registered response matches an incoming request."""

    def __init__(self, message: str, request: GraphQLRequest) -> None:
        super().__init__(message)
        self.request = request


class MalformedMockError(MockLinkError):
    """Raised when a matched mock has neither a result nor an error."""

    def __init__(self, key: str) -> None:
        super().__init__(
            f"Mocked response should contain either result or error: {key}"
        )
        self.key = key


class MockLink:
    """Link that answers requests from a fixed script of mocked responses.

    Each registered response is consumed by the first request whose query
    and variables match it, unless it carries ``new_data``.  Delivery is
    asynchronous, after the response's ``delay``, on the running event loop.
    """

    def __init__(
        self,
        mocked_responses: Iterable[MockedResponse | dict[str, Any]] | None = None,
        add_typename: bool = True,
    ) -> None:
        self._registry = ResponseRegistry(add_typename=add_typename)
        self._operation: GraphQLRequest | None = None
        for mocked_response in mocked_responses or ():
            self.add_mocked_response(mocked_response)

    @property
    def add_typename(self) -> bool:
        return self._registry.add_typename

    @property
    def registry(self) -> ResponseRegistry:
        return self._registry

    @property
    def operation(self) -> GraphQLRequest | None:
        """The most recent request passed to :meth:`request`."""
        return self._operation

    @property
    def remaining(self) -> int:
        """Number of mocked responses still queued."""
        return len(self._registry)

    def add_mocked_response(
        self, mocked_response: MockedResponse | dict[str, Any]
    ) -> None:
        """Register one more mocked response after construction."""
        if not isinstance(mocked_response, MockedResponse):
            mocked_response = MockedResponse.model_validate(mocked_response)
        self._registry.register(mocked_response)

    def request(
        self, operation: GraphQLRequest | dict[str, Any]
    ) -> Observable[FetchResult]:
        """Match *operation* and return a channel that will replay its outcome.

        Raises:
            NoMatchError: Nothing registered matches the query and variables.
            MalformedMockError: The matched mock has no result and no error.
        """
        if not isinstance(operation, GraphQLRequest):
            operation = GraphQLRequest.model_validate(operation)
        self._operation = operation

        key = self._registry.fingerprint(operation)
        response = self._registry.take(key, operation.variables)
        if response is None:
            msg = no_match_message(
                operation,
                (r.request for r in self._registry.all_responses()),
                self.add_typename,
            )
            logger.warning("No mocked response matched %s", key)
            raise NoMatchError(msg, operation)

        result, error, delay = response.result, response.error, response.delay
        if result is None and error is None:
            raise MalformedMockError(key)

        logger.debug("Matched mocked response for %s (delay=%dms)", key, delay)
        return Observable(lambda observer: _schedule(result, error, delay, observer))


def _schedule(
    result: ResultSource | None,
    error: BaseException | None,
    delay: int,
    observer: SubscriptionObserver[FetchResult],
) -> Teardown:
    """Deliver the matched outcome after *delay* ms; return the timer's canceller."""

    fired = False

    def _deliver() -> None:
        nonlocal fired
        fired = True
        if error is not None:
            observer.error(error)
            return
        if result is not None:
            try:
                value = result.resolve()
            except Exception as exc:
                observer.error(exc)
                return
            observer.next(value)
        observer.complete()

    loop = asyncio.get_running_loop()
    handle = loop.call_later(delay / 1000, _deliver)

    def _cancel() -> None:
        if not fired:
            logger.debug("Cancelled pending mocked delivery")
        handle.cancel()

    return _cancel


def mock_single_link(*mocked_responses: Any) -> MockLink:
    """Build a :class:`MockLink` from varargs.

    A trailing ``bool`` is taken as the ``add_typename`` flag.
    """
    add_typename = True
    mocks = list(mocked_responses)
    if mocks and isinstance(mocks[-1], bool):
        add_typename = mocks.pop()
    return MockLink(mocks, add_typename=add_typename)
