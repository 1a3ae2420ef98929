# listing_engine/services/debouncer.py

"""Temporal gate that commits a changing value once it settles."""

import asyncio
import logging
from collections.abc import Callable
from typing import Generic, TypeVar

from listing_engine.config.settings import Settings

logger = logging.getLogger("listing_engine.debounce")

T = TypeVar("T")


class Debouncer(Generic[T]):
    """Hold the last committed value until new input stays unchanged
    for ``delay`` seconds.

    Each :meth:`push` cancels the pending commit and restarts the timer
    against the newest value.  The timer is an ``asyncio`` handle, so
    :meth:`close` leaves nothing scheduled behind.
    """

    def __init__(
        self,
        initial: T,
        delay: float | None = None,
        on_commit: Callable[[T], None] | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._value: T = initial
        self._pending_value: T = initial
        self._delay: float = (
            Settings.DEBOUNCE_DELAY if delay is None else delay
        )
        self._on_commit = on_commit
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None
        self._waiters: list[asyncio.Future[T]] = []
        self._closed = False

    @property
    def value(self) -> T:
        """The last committed value."""
        return self._value

    @property
    def pending(self) -> bool:
        """True while a commit is scheduled."""
        return self._handle is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def push(self, value: T) -> None:
        """Feed a new input value, restarting the quiescence timer."""
        if self._closed:
            msg = "Debouncer is closed"
            raise RuntimeError(msg)
        if self._handle is not None:
            self._handle.cancel()
        self._pending_value = value
        self._handle = self._get_loop().call_later(
            self._delay, self._commit
        )

    def _commit(self) -> None:
        self._handle = None
        self._value = self._pending_value
        logger.debug("Debounced value committed: %r", self._value)

        waiters, self._waiters = self._waiters, []
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(self._value)

        if self._on_commit is not None:
            self._on_commit(self._value)

    async def wait(self) -> T:
        """Wait for the next commit and return the committed value."""
        if self._closed:
            msg = "Debouncer is closed"
            raise RuntimeError(msg)
        waiter: asyncio.Future[T] = self._get_loop().create_future()
        self._waiters.append(waiter)
        return await waiter

    def cancel(self) -> bool:
        """Drop the pending commit, keeping the current value.

        Returns True if a commit was pending.
        """
        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        return True

    def close(self) -> None:
        """Cancel any pending commit and refuse further input."""
        self.cancel()
        self._closed = True
        for waiter in self._waiters:
            waiter.cancel()
        self._waiters.clear()
