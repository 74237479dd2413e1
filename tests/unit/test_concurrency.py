# tests/unit/test_concurrency.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import threading
from unittest.mock import MagicMock

import pytest

from termcast.runtime.concurrency import _LockFactory, get_condition, get_rlock, with_lock


def test_lock_factory():
    """Test that the lock factory creates proper primitives."""
    lf = _LockFactory()
    for lock in (lf.create_lock(), lf.create_rlock(), lf.create_condition()):
        assert hasattr(lock, "acquire")
        assert hasattr(lock, "release")


def test_get_rlock_is_reentrant():
    lock = get_rlock()
    with with_lock(lock):
        with with_lock(lock):
            pass


def test_get_rlock_is_not_shared():
    assert get_rlock() is not get_rlock()


def test_get_condition_notifies():
    condition = get_condition()
    woken = []

    def _waiter():
        with condition:
            woken.append(condition.wait(timeout=5.0))

    thread = threading.Thread(target=_waiter)
    thread.start()
    while True:
        with condition:
            condition.notify_all()
        thread.join(timeout=0.01)
        if not thread.is_alive():
            break
    assert woken == [True]


def test_with_lock():
    """Test that with_lock properly acquires and releases the lock."""
    lock = MagicMock()
    with with_lock(lock):
        lock.acquire.assert_called_once()
    lock.release.assert_called_once()


def test_with_lock_exception():
    """Test that with_lock releases the lock even when an exception occurs."""
    lock = MagicMock()
    with pytest.raises(RuntimeError):
        with with_lock(lock):
            raise RuntimeError("Test error")
    lock.acquire.assert_called_once()
    lock.release.assert_called_once()
