# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import threading
from unittest.mock import MagicMock

import pytest

from termcast.core.operation import Cast
from termcast.runtime.config import EnvironmentConfig
from termcast.runtime.environment import TypingEnvironment
from termcast.runtime.pending import PendingResult


class RecordingHook:
    """
    A hook that appends a record for every environment event, so tests can
    compare the sequence of events against an expected trace.
    """

    def __init__(self):
        self.trace = []

    def on_type_created(self, type_):
        self.trace.append(f"TYPE:{type_.qualified_name}")

    def on_cast_registered(self, source, target, operation):
        self.trace.append(f"CAST:{source.qualified_name}->{target.qualified_name}")

    def on_resolve(self, instance, target, result):
        self.trace.append(f"RESOLVE:{instance.type.qualified_name}->{target.qualified_name}")

    def on_error(self, error):
        self.trace.append(f"ERROR:{type(error).__name__}")


@pytest.fixture
def env():
    """A bare typing environment with only the root type."""
    return TypingEnvironment()


@pytest.fixture
def builtin_env():
    """An environment with the built-in Python types and casts installed."""
    return TypingEnvironment(EnvironmentConfig(install_builtins=True))


@pytest.fixture
def int_type(env):
    return env.type_of(int)


@pytest.fixture
def str_type(env):
    return env.type_of(str)


@pytest.fixture
def stringify(int_type, str_type):
    """The element-wise int -> str cast, not yet registered."""
    return Cast.elementwise("stringify", int_type, str_type, str)


@pytest.fixture
def recording_hook():
    return RecordingHook()


@pytest.fixture
def traced_env(recording_hook):
    """An environment reporting to a RecordingHook; returns (env, trace)."""
    return TypingEnvironment(hooks=[recording_hook]), recording_hook.trace


@pytest.fixture
def mock_hook():
    """A hook mock exposing every EnvironmentHook method."""
    hook = MagicMock()
    hook.on_type_created = MagicMock()
    hook.on_cast_registered = MagicMock()
    hook.on_resolve = MagicMock()
    hook.on_error = MagicMock()
    return hook


@pytest.fixture
def pending():
    """An uncompleted pending result with the default max timeout."""
    return PendingResult(name="test")


@pytest.fixture
def list_source():
    """A mutable source backed by a list the test can modify."""

    class _ListSource:
        def __init__(self):
            self.items = []

        def snapshot(self):
            return list(self.items)

    return _ListSource()


@pytest.fixture(autouse=True)
def cleanup_threads():
    yield
    # Cleanup any remaining threads after each test
    for thread in threading.enumerate():
        if thread != threading.current_thread() and thread.is_alive():
            thread.join(timeout=1.0)
