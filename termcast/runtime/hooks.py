# termcast/runtime/hooks.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
import traceback
from typing import TYPE_CHECKING, Any, Iterable, List, Optional

from termcast.core.errors import TermcastError, create_error_context

if TYPE_CHECKING:
    from termcast.core.instance import Instance
    from termcast.core.type_def import Type
    from termcast.interfaces.protocols import EnvironmentHook, TermOperation


class HookManager:
    """
    Manages the registration and execution of hooks that observe a typing
    environment (type creation, cast registration, resolution, errors). Users
    can attach logging, monitoring, or custom side effects without altering
    core logic.

    Hooks may implement any subset of the EnvironmentHook methods. They run in
    registration order, and an exception raised by a hook propagates to the
    caller of the environment operation.
    """

    def __init__(self, hooks: Optional[Iterable["EnvironmentHook"]] = None) -> None:
        self._hooks: List["EnvironmentHook"] = list(hooks or [])

    def register_hook(self, hook: "EnvironmentHook") -> None:
        """
        Add a new hook to the manager's list of hooks.

        :param hook: An object implementing some EnvironmentHook methods.
        """
        self._hooks.append(hook)

    @property
    def hooks(self) -> List["EnvironmentHook"]:
        return list(self._hooks)

    def execute_on_type_created(self, type_: "Type[Any]") -> None:
        for hook in self._hooks:
            if hasattr(hook, "on_type_created"):
                hook.on_type_created(type_)

    def execute_on_cast_registered(
        self, source: "Type[Any]", target: "Type[Any]", operation: "TermOperation"
    ) -> None:
        for hook in self._hooks:
            if hasattr(hook, "on_cast_registered"):
                hook.on_cast_registered(source, target, operation)

    def execute_on_resolve(self, instance: "Instance[Any]", target: "Type[Any]", result: "Instance[Any]") -> None:
        for hook in self._hooks:
            if hasattr(hook, "on_resolve"):
                hook.on_resolve(instance, target, result)

    def execute_on_error(self, error: Exception) -> None:
        for hook in self._hooks:
            if hasattr(hook, "on_error"):
                hook.on_error(error)


class LoggingHook:
    """
    Hook that records environment events on a standard library logger.
    Handlers and levels are left to the application.
    """

    def __init__(self, logger_name: str = "termcast.environment", level: int = logging.INFO) -> None:
        self._logger = logging.getLogger(logger_name)
        self._level = level

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def on_type_created(self, type_: "Type[Any]") -> None:
        self._logger.log(self._level, "Created type %s (%s)", type_.qualified_name, type_.native_class.__name__)

    def on_cast_registered(self, source: "Type[Any]", target: "Type[Any]", operation: "TermOperation") -> None:
        self._logger.log(
            self._level,
            "Registered cast %s -> %s as %s",
            source.qualified_name,
            target.qualified_name,
            operation.name,
        )

    def on_resolve(self, instance: "Instance[Any]", target: "Type[Any]", result: "Instance[Any]") -> None:
        self._logger.log(
            self._level,
            "Resolved %s -> %s: %r",
            instance.type.qualified_name,
            target.qualified_name,
            result.term,
        )

    def on_error(self, error: Exception) -> None:
        if not isinstance(error, TermcastError):
            self._logger.warning("Environment error: %s", error)
            return
        tb = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        context = create_error_context(error, tb)
        self._logger.warning(
            "Environment error %s: %s %s",
            context.error_type.__name__,
            error.message,
            context.details,
        )
        self._logger.debug("%s", context.traceback)
