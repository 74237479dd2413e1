# termcast/runtime/concurrency.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator, Union

AnyLock = Union["threading.Lock", "threading.RLock"]


class _LockFactory:
    """
    Internal factory for producing the synchronization primitives used by the
    runtime: plain locks for leaf structures, re-entrant locks for registries
    whose mutation paths call each other.
    """

    def create_lock(self) -> threading.Lock:
        """
        Return a new lock instance.
        """
        return threading.Lock()

    def create_rlock(self) -> threading.RLock:
        """
        Return a new re-entrant lock instance.
        """
        return threading.RLock()

    def create_condition(self) -> threading.Condition:
        """
        Return a new condition variable over a plain lock.
        """
        return threading.Condition(self.create_lock())


_factory = _LockFactory()


def get_rlock() -> threading.RLock:
    """
    Provide a new re-entrant lock, used as the single writer lock of a
    typing environment.
    """
    return _factory.create_rlock()


def get_condition() -> threading.Condition:
    """
    Provide a new condition variable, used by pending results to wake waiters.
    """
    return _factory.create_condition()


@contextmanager
def with_lock(lock: AnyLock) -> Iterator[None]:
    """
    A convenience context manager that acquires the given lock upon entry and
    releases it upon exit, ensuring safe access to shared resources.
    """
    lock.acquire()
    try:
        yield
    finally:
        lock.release()
