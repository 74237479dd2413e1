# termcast/runtime/pending.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Pending results backing Blocking Terms.

A PendingResult is the producer-side handle of a computation running
elsewhere (another thread, a remote node). Consumers hold a Blocking Term over
it and either poll it or wait with a bounded timeout. Waiting past the budget
yields a Timeout error Term; abandoning a wait yields a Cancelled error Term.
Neither affects the producer.
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from typing import Any, Callable, Iterable, List, Optional, Tuple

from termcast.core.errors import ResultAlreadyCompletedError
from termcast.core.multiplicity import Blocking
from termcast.core.term import Term
from termcast.runtime.concurrency import get_condition

logger = logging.getLogger(__name__)

DoneCallback = Callable[[Term], None]

# Granularity at which a cancellable wait re-checks its cancel event.
_CANCEL_POLL_INTERVAL = 0.01

# Cap on any single wait when the producer sets none.
DEFAULT_MAX_TIMEOUT = 30.0


def _check_max_timeout(max_timeout: float) -> float:
    if max_timeout is None or not math.isfinite(max_timeout) or max_timeout < 0:
        raise ValueError(f"max_timeout must be a finite non-negative number, got {max_timeout!r}")
    return max_timeout


def _effective_budget(timeout: Optional[float], max_timeout: float) -> float:
    if timeout is None:
        return max_timeout
    if timeout < 0:
        raise ValueError("Timeout must be non-negative")
    return min(timeout, max_timeout)


class PendingResult:
    """
    A result that some producer will complete exactly once.

    The producer calls complete(), fail() or cancel(), and may publish progress
    with update_partial(). Consumers call poll(), wait() or wait_async(), or
    register a done callback.
    """

    def __init__(self, max_timeout: float = DEFAULT_MAX_TIMEOUT, name: Optional[str] = None) -> None:
        """
        :param max_timeout: Upper bound in seconds for any single wait.
        :param name: Optional label used in logs and reprs.
        """
        self._max_timeout = _check_max_timeout(max_timeout)
        self._name = name or f"pending-{id(self):x}"
        self._condition = get_condition()
        self._final: Optional[Term] = None
        self._partial: Tuple[Any, ...] = ()
        self._callbacks: List[DoneCallback] = []
        self._created_at = time.monotonic()

    @property
    def name(self) -> str:
        return self._name

    @property
    def max_timeout(self) -> float:
        return self._max_timeout

    def term(self, timeout: Optional[float] = None) -> Term:
        """Return a Blocking Term over this result."""
        return Term.blocking(self, timeout)

    # -------------------------------------------------------------------------
    # Producer side
    # -------------------------------------------------------------------------

    def complete(self, term: Term) -> None:
        """
        Publish the final Term. Mutable Terms are snapshotted first.

        :raises ResultAlreadyCompletedError: If this result is already complete.
        :raises ValueError: If the final Term is itself Blocking.
        """
        if not self._try_complete(term):
            raise ResultAlreadyCompletedError(
                f"Pending result {self._name} is already complete", {"name": self._name}
            )

    def fail(self, details: Any) -> None:
        """Complete with an Error Term."""
        self.complete(Term.error(details))

    def cancel(self, reason: str = "cancelled") -> bool:
        """
        Complete with a Cancelled error Term unless already complete.

        :return: True if this call cancelled the result.
        """
        with self._condition:
            partial = self._partial
        return self._try_complete(Term.cancelled(reason, partial))

    def update_partial(self, elements: Iterable[Any]) -> None:
        """Publish the elements produced so far."""
        with self._condition:
            self._partial = tuple(elements)

    def _try_complete(self, term: Term) -> bool:
        if not isinstance(term, Term):
            raise ValueError(f"Pending result must complete with a Term, not {term!r}")
        final = term.idempotent()
        if isinstance(final.multiplicity, Blocking):
            raise ValueError("Pending result cannot complete with a Blocking term")

        with self._condition:
            if self._final is not None:
                return False
            self._final = final
            callbacks, self._callbacks = self._callbacks, []
            self._condition.notify_all()

        logger.debug(
            "Pending result %s completed after %.3fs: %r",
            self._name,
            time.monotonic() - self._created_at,
            final,
        )
        self._run_callbacks(callbacks, final)
        return True

    @staticmethod
    def _run_callbacks(callbacks: List[DoneCallback], final: Term) -> None:
        first_error: Optional[Exception] = None
        for callback in callbacks:
            try:
                callback(final)
            except Exception as e:
                logger.exception("Done callback %r failed", callback)
                if first_error is None:
                    first_error = e
        if first_error is not None:
            raise first_error

    # -------------------------------------------------------------------------
    # Consumer side
    # -------------------------------------------------------------------------

    def done(self) -> bool:
        with self._condition:
            return self._final is not None

    def poll(self) -> Optional[Term]:
        """Return the final Term if available, otherwise None. Never waits."""
        with self._condition:
            return self._final

    def partial(self) -> Term:
        """Return the final Term if complete, else a Partial Term of progress so far."""
        with self._condition:
            if self._final is not None:
                return self._final
            return Term.partial(self._partial)

    def add_done_callback(self, callback: DoneCallback) -> None:
        """
        Call ``callback(final_term)`` once this result completes. If it already
        has, the callback runs immediately in the caller's thread.
        """
        with self._condition:
            final = self._final
            if final is None:
                self._callbacks.append(callback)
                return
        self._run_callbacks([callback], final)

    def wait(self, timeout: Optional[float] = None, cancel: Optional[Any] = None) -> Term:
        """
        Block until completion, the budget runs out, or ``cancel`` is set.

        :param timeout: Seconds to wait, capped by max_timeout. 0 polls once;
                        None waits up to max_timeout.
        :param cancel: Optional threading.Event; setting it abandons this wait.
        :return: The final Term, a Timeout error Term or a Cancelled error Term.
        """
        budget = _effective_budget(timeout, self._max_timeout)
        deadline = time.monotonic() + budget

        with self._condition:
            while self._final is None:
                if cancel is not None and cancel.is_set():
                    logger.debug("Wait on %s cancelled by caller", self._name)
                    return Term.cancelled("wait cancelled", self._partial)
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    logger.debug("Wait on %s timed out after %ss", self._name, budget)
                    return Term.timeout(budget, self._partial)
                if cancel is not None:
                    remaining = min(remaining, _CANCEL_POLL_INTERVAL)
                self._condition.wait(remaining)
            return self._final

    async def wait_async(self, timeout: Optional[float] = None) -> Term:
        """
        Await completion without blocking the event loop.

        Cancelling the awaiting task raises asyncio.CancelledError in the caller;
        the producer and other waiters are unaffected.
        """
        budget = _effective_budget(timeout, self._max_timeout)
        final = self.poll()
        if final is not None:
            return final
        if budget == 0:
            return self._timed_out(budget)

        loop = asyncio.get_running_loop()
        future: asyncio.Future = loop.create_future()

        def _resolve(term: Term) -> None:
            if not future.done():
                future.set_result(term)

        def _on_done(term: Term) -> None:
            if not loop.is_closed():
                loop.call_soon_threadsafe(_resolve, term)

        self.add_done_callback(_on_done)
        try:
            return await asyncio.wait_for(asyncio.shield(future), timeout=budget)
        except asyncio.TimeoutError:
            logger.debug("Async wait on %s timed out after %ss", self._name, budget)
            return self._timed_out(budget)

    def _timed_out(self, budget: float) -> Term:
        with self._condition:
            return Term.timeout(budget, self._partial)

    def __repr__(self) -> str:
        state = "done" if self.done() else "pending"
        return f"PendingResult({self._name!r}, {state})"


def pipe(term: Term, operation: Any) -> Term:
    """
    Apply ``operation`` to a Blocking Term's final result once it arrives,
    returning a new Blocking Term with the same await budget.
    """
    blocking = term.multiplicity
    if not isinstance(blocking, Blocking):
        return operation.apply(term)

    upstream = blocking.result
    downstream = PendingResult(max_timeout=upstream.max_timeout, name=f"{operation.name}({upstream.name})")

    def _forward(final: Term) -> None:
        try:
            converted = operation.apply(final)
        except Exception as e:
            logger.exception("Operation %s failed on the result of %s", operation.name, upstream.name)
            converted = Term.error(e)
        downstream._try_complete(converted)

    upstream.add_done_callback(_forward)
    return Term.blocking(downstream, blocking.timeout)
