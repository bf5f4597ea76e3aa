"""Minimal push-based channel: one value then completion, or one error."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

#: Teardown returned by a subscriber; called once on unsubscribe.
Teardown = Callable[[], None]


class SubscriptionObserver(Generic[T]):
    """Observer handed to a subscriber function.

    Guards the delivery contract: values are only forwarded while the
    subscription is open, and the first ``error`` or ``complete`` closes it.
    """

    def __init__(
        self,
        subscription: Subscription,
        on_next: Callable[[T], None] | None,
        on_error: Callable[[BaseException], None] | None,
        on_complete: Callable[[], None] | None,
    ) -> None:
        self._subscription = subscription
        self._on_next = on_next
        self._on_error = on_error
        self._on_complete = on_complete

    @property
    def closed(self) -> bool:
        return self._subscription.closed

    def next(self, value: T) -> None:
        if self.closed:
            return
        if self._on_next is not None:
            self._on_next(value)

    def error(self, exc: BaseException) -> None:
        if self.closed:
            return
        self._subscription._close()
        if self._on_error is not None:
            self._on_error(exc)
        else:
            logger.error("Unhandled error delivered to observer: %s", exc)

    def complete(self) -> None:
        if self.closed:
            return
        self._subscription._close()
        if self._on_complete is not None:
            self._on_complete()


class Subscription:
    """Handle returned by :meth:`Observable.subscribe`."""

    def __init__(self) -> None:
        self._closed = False
        self._teardown: Teardown | None = None

    @property
    def closed(self) -> bool:
        """True once the channel terminated or was unsubscribed."""
        return self._closed

    def unsubscribe(self) -> None:
        """Cancel pending work; nothing is delivered afterwards."""
        if self._closed:
            return
        self._close()

    def _close(self) -> None:
        self._closed = True
        teardown, self._teardown = self._teardown, None
        if teardown is not None:
            teardown()


class Observable(Generic[T]):
    """Lazy channel: *subscriber* runs once per :meth:`subscribe` call."""

    def __init__(
        self,
        subscriber: Callable[[SubscriptionObserver[T]], Teardown | None],
    ) -> None:
        self._subscriber = subscriber

    def subscribe(
        self,
        on_next: Callable[[T], None] | None = None,
        on_error: Callable[[BaseException], None] | None = None,
        on_complete: Callable[[], None] | None = None,
    ) -> Subscription:
        subscription = Subscription()
        observer = SubscriptionObserver(subscription, on_next, on_error, on_complete)
        try:
            teardown = self._subscriber(observer)
        except Exception as exc:
            observer.error(exc)
            return subscription

        if subscription.closed:
            # Terminated synchronously inside the subscriber.
            if teardown is not None:
                teardown()
        else:
            subscription._teardown = teardown
        return subscription

    async def first(self) -> T | None:
        """Subscribe and wait for the outcome.

        Returns the delivered value, or ``None`` if the channel completed
        without one.  A delivered error is raised.  Cancelling the waiting
        task unsubscribes, suppressing any pending delivery.
        """
        loop = asyncio.get_running_loop()
        future: asyncio.Future[T | None] = loop.create_future()
        received: list[T] = []

        def _on_next(value: T) -> None:
            received.append(value)

        def _on_error(exc: BaseException) -> None:
            if not future.done():
                future.set_exception(exc)

        def _on_complete() -> None:
            if not future.done():
                future.set_result(received[0] if received else None)

        subscription = self.subscribe(_on_next, _on_error, _on_complete)
        try:
            return await future
        finally:
            subscription.unsubscribe()
