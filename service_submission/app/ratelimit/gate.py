"""
Rolling-window rate gate for registry submissions.

Every admission checks out one of ``limit`` permits and returns it exactly
``interval`` seconds later, so no more than ``limit`` admissions start in
any trailing window of ``interval`` seconds.
"""

import asyncio
import itertools
from collections import deque
from typing import Callable, Deque, Dict, Optional, Set

from shared.logging import get_logger
from shared.errors import GateInterrupted


class ReleaseScheduler:
    """Timers that hand permits back to a rate gate.

    At most one timer exists per checked-out permit. A timer is forgotten
    as soon as it fires or is cancelled.
    """

    def __init__(self, delay: float, callback: Callable[[], None]):
        self.delay = delay
        self.callback = callback
        self._tickets = itertools.count()
        self._pending: Dict[int, asyncio.TimerHandle] = {}
        self._closed = False

    @property
    def pending(self) -> int:
        """Number of releases not yet fired."""
        return len(self._pending)

    def schedule(self) -> int:
        """Schedule one release ``delay`` seconds from now."""
        if self._closed:
            raise RuntimeError("Release scheduler is closed")
        loop = asyncio.get_running_loop()
        ticket = next(self._tickets)
        self._pending[ticket] = loop.call_later(self.delay, self._fire, ticket)
        return ticket

    def cancel(self, ticket: int) -> bool:
        """Cancel a scheduled release; False if it already fired."""
        handle = self._pending.pop(ticket, None)
        if handle is None:
            return False
        handle.cancel()
        return True

    def close(self) -> None:
        """Cancel every pending release."""
        self._closed = True
        for handle in self._pending.values():
            handle.cancel()
        self._pending.clear()

    def _fire(self, ticket: int) -> None:
        if self._pending.pop(ticket, None) is not None:
            self.callback()


class RateGate:
    """Admit at most ``limit`` submissions per rolling ``interval``.

    Waiters are admitted in arrival order: a permit coming back from its
    timer goes straight to the oldest waiter, never to a newcomer. The gate
    belongs to the event loop that first uses it.
    """

    def __init__(self, interval: float, limit: int, name: str = "registry"):
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ValueError(f"limit must be a positive integer, got {limit!r}")
        if isinstance(interval, bool) or not isinstance(interval, (int, float)) or interval <= 0:
            raise ValueError(f"interval must be positive, got {interval!r}")

        self.interval = float(interval)
        self.limit = limit
        self.name = name
        self.logger = get_logger("submission.rate_gate")

        self._permits = limit
        self._waiters: Deque[asyncio.Future] = deque()
        self._expired: Set[asyncio.Future] = set()
        self._scheduler = ReleaseScheduler(self.interval, self._release)
        self._closed = False

    @classmethod
    def configure(cls, interval: float, limit: int) -> "RateGate":
        """Build a gate with ``limit`` permits available."""
        return cls(interval, limit)

    @property
    def available(self) -> int:
        return self._permits

    @property
    def waiting(self) -> int:
        return sum(1 for waiter in self._waiters if not waiter.done())

    @property
    def pending_releases(self) -> int:
        return self._scheduler.pending

    @property
    def closed(self) -> bool:
        return self._closed

    async def acquire(self, timeout: Optional[float] = None) -> None:
        """Wait for a permit and consume it.

        Raises GateInterrupted when the gate is closed, when ``timeout``
        seconds pass first, or when the waiting task is cancelled. No permit
        is held by the caller in any of those cases.
        """
        if self._closed:
            raise GateInterrupted("Rate gate is closed", details={"gate": self.name, "reason": "closed"})

        if self._permits > 0 and not self.waiting:
            self._consume()
            return

        loop = asyncio.get_running_loop()
        waiter = loop.create_future()
        self._waiters.append(waiter)
        self._wake_next()
        if not waiter.done():
            self.logger.debug("Waiting for rate gate permit", gate=self.name, waiting=self.waiting)

        expiry = None
        if timeout is not None:
            expiry = loop.call_later(timeout, self._expire, waiter)

        try:
            await waiter
        except asyncio.CancelledError as e:
            self._abandon(waiter)
            reason = "timeout" if waiter in self._expired else "cancelled"
            raise GateInterrupted(
                f"Rate gate wait {reason}",
                details={"gate": self.name, "reason": reason}
            ) from e
        finally:
            if expiry is not None:
                expiry.cancel()
            self._expired.discard(waiter)

    def close(self) -> None:
        """Cancel pending releases and fail every waiter."""
        if self._closed:
            return
        self._closed = True
        self._scheduler.close()

        failed = 0
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_exception(GateInterrupted(
                    "Rate gate is closed",
                    details={"gate": self.name, "reason": "closed"}
                ))
                failed += 1

        self.logger.info("Rate gate closed", gate=self.name, failed_waiters=failed)

    def _consume(self) -> int:
        self._permits -= 1
        return self._scheduler.schedule()

    def _release(self) -> None:
        if self._closed:
            return
        self._permits += 1
        self._wake_next()

    def _wake_next(self) -> None:
        while self._permits > 0 and self._waiters:
            waiter = self._waiters.popleft()
            if waiter.done():
                continue
            # The release window starts at hand-off, not when the waiter resumes.
            waiter.set_result(self._consume())

    def _abandon(self, waiter: asyncio.Future) -> None:
        try:
            self._waiters.remove(waiter)
        except ValueError:
            pass

        if waiter.done() and not waiter.cancelled() and waiter.exception() is None:
            # Permit was handed over but the waiter never resumed: give it back.
            if self._scheduler.cancel(waiter.result()) and not self._closed:
                self._permits += 1

        if not self._closed:
            self._wake_next()

    def _expire(self, waiter: asyncio.Future) -> None:
        if not waiter.done():
            self._expired.add(waiter)
            waiter.cancel()
