# termcast/runtime/environment.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""Typing environment: the namespace tree of Types and the cast table."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional
from typing import Type as PyType

from termcast.core.errors import (
    DuplicateSubtypeError,
    EnvironmentInitError,
    NoCastRegisteredError,
    TermcastError,
    UnknownSubtypeError,
    UnknownTypeError,
)
from termcast.core.instance import Instance
from termcast.core.operation import Cast
from termcast.core.term import Term
from termcast.core.type_def import Type
from termcast.core.types import CastKey, TypeId
from termcast.interfaces.protocols import EnvironmentHook, TermOperation
from termcast.runtime.concurrency import get_rlock, with_lock
from termcast.runtime.config import EnvironmentConfig
from termcast.runtime.hooks import HookManager, LoggingHook
from termcast.runtime.pending import PendingResult

logger = logging.getLogger(__name__)


class TypingEnvironment:
    """
    Owns a tree of Types rooted at one root Type, and the casts registered
    between them.

    All mutation (type creation, sub-types, cast registration) runs under one
    re-entrant writer lock with insert-if-absent checks, so concurrent callers
    never create two Types for one native class or two casts for one ordered
    pair. Reads are plain dictionary lookups and never take the lock.
    """

    def __init__(
        self,
        config: Optional[EnvironmentConfig] = None,
        hooks: Optional[Iterable[EnvironmentHook]] = None,
    ) -> None:
        """
        :param config: Environment settings; defaults to EnvironmentConfig().
        :param hooks: Hooks observing this environment, in call order.
        :raises EnvironmentInitError: If the built-in type system cannot be installed.
        """
        self._config = config or EnvironmentConfig()
        self._lock = get_rlock()
        self._hooks = HookManager()
        if self._config.log_events:
            self._hooks.register_hook(LoggingHook(self._config.logger_name))
        for hook in hooks or ():
            self._hooks.register_hook(hook)

        self._root: Type[Any] = Type(self._config.root_name, object, (), lock=self._lock)
        self._types_by_id: Dict[TypeId, Type[Any]] = {self._root.id: self._root}
        self._types_by_class: Dict[type, Type[Any]] = {object: self._root}

        if self._config.install_builtins:
            from termcast.runtime.builtins import install_builtins

            try:
                install_builtins(self)
            except Exception as e:
                raise EnvironmentInitError(
                    f"Failed to install built-in type system: {e}",
                    {"root": self._config.root_name},
                ) from e

    @property
    def config(self) -> EnvironmentConfig:
        return self._config

    @property
    def root(self) -> Type[Any]:
        return self._root

    @property
    def hooks(self) -> HookManager:
        return self._hooks

    def add_hook(self, hook: EnvironmentHook) -> None:
        self._hooks.register_hook(hook)

    # -------------------------------------------------------------------------
    # Types
    # -------------------------------------------------------------------------

    def type_of(self, native_class: PyType[Any]) -> Type[Any]:
        """
        Get or create the root-level Type for a native class. Exactly one Type
        ever exists per class, however many threads ask at once.
        """
        type_ = self._types_by_class.get(native_class)
        if type_ is not None:
            return type_
        if not isinstance(native_class, type):
            raise ValueError(f"type_of requires a class, not {native_class!r}")

        with with_lock(self._lock):
            type_ = self._types_by_class.get(native_class)
            if type_ is not None:
                return type_
            try:
                type_ = self._create(self._root_level_name(native_class), native_class, self._root)
            except TermcastError as e:
                self._hooks.execute_on_error(e)
                raise
            self._types_by_class[native_class] = type_

        self._hooks.execute_on_type_created(type_)
        return type_

    def find_type(self, native_class: PyType[Any]) -> Optional[Type[Any]]:
        """Return the Type for a native class, or None. Never creates."""
        return self._types_by_class.get(native_class)

    def lookup(self, qualified_name: str) -> Type[Any]:
        """
        Find a Type by its dotted name, e.g. ``"number.int"``.

        :raises UnknownTypeError: If any segment is missing.
        """
        current = self._root
        try:
            for segment in qualified_name.split("."):
                current = current.child(segment)
        except UnknownSubtypeError as e:
            error = UnknownTypeError(f"Unknown type '{qualified_name}'", qualified_name)
            self._hooks.execute_on_error(error)
            raise error from e
        return current

    def subtype(
        self, parent: Type[Any], name: str, native_class: Optional[PyType[Any]] = None
    ) -> Type[Any]:
        """
        Get or create the child Type ``name`` under ``parent``.

        :param native_class: Defaults to the parent's native class.
        :raises UnknownTypeError: If ``parent`` is not owned by this environment.
        :raises DuplicateSubtypeError: If the child exists with another native class.
        """
        self._require_owned(parent)
        with with_lock(self._lock):
            if parent.has_child(name):
                existing = parent.child(name)
                if native_class is not None and existing.native_class is not native_class:
                    error = DuplicateSubtypeError(
                        f"Sub-type '{existing.qualified_name}' already exists for "
                        f"{existing.native_class.__name__}",
                        name,
                        parent,
                    )
                    self._hooks.execute_on_error(error)
                    raise error
                return existing
            try:
                type_ = self._create(name, native_class or parent.native_class, parent)
            except TermcastError as e:
                self._hooks.execute_on_error(e)
                raise

        self._hooks.execute_on_type_created(type_)
        return type_

    def types(self) -> List[Type[Any]]:
        """All Types owned by this environment, root first."""
        with with_lock(self._lock):
            return list(self._types_by_id.values())

    def owns(self, type_: Any) -> bool:
        return isinstance(type_, Type) and self._types_by_id.get(type_.id) is type_

    def _require_owned(self, type_: Any) -> None:
        if not self.owns(type_):
            error = UnknownTypeError(f"{type_!r} is not registered in this environment", type_)
            self._hooks.execute_on_error(error)
            raise error

    def _root_level_name(self, native_class: type) -> str:
        name = native_class.__name__
        existing = self._root.children().get(name)
        if existing is None:
            return name
        return f"{native_class.__module__}_{native_class.__qualname__}".replace(".", "_")

    def _create(self, name: str, native_class: type, parent: Type[Any]) -> Type[Any]:
        # Caller holds the writer lock.
        path = () if parent is self._root else parent.path + (parent.name,)
        type_ = Type(name, native_class, path, lock=self._lock)
        if type_.id in self._types_by_id:
            raise DuplicateSubtypeError(f"Type '{type_.qualified_name}' already exists", name, parent)
        parent.add_child(name, type_)
        self._types_by_id[type_.id] = type_
        logger.debug("Created type %s for %s", type_.qualified_name, native_class.__name__)
        return type_

    # -------------------------------------------------------------------------
    # Casts
    # -------------------------------------------------------------------------

    def register(self, cast: Cast[Any, Any]) -> None:
        """
        Register a Cast between two Types of this environment.

        :raises UnknownTypeError: If either endpoint is not owned by this environment.
        :raises DuplicateCastError: If a cast for the same ordered pair exists.
        """
        if not isinstance(cast, Cast):
            raise ValueError(f"register requires a Cast, not {cast!r}")
        self._require_owned(cast.source)
        self._require_owned(cast.target)
        try:
            cast.source.register_cast(cast.target, cast)
        except TermcastError as e:
            self._hooks.execute_on_error(e)
            raise
        self._hooks.execute_on_cast_registered(cast.source, cast.target, cast)

    def cast_table(self) -> Dict[CastKey, TermOperation]:
        """Snapshot of every registered cast, keyed by (source id, target id)."""
        with with_lock(self._lock):
            return {
                (type_.id, target_id): operation
                for type_ in self._types_by_id.values()
                for target_id, operation in type_.casts().items()
            }

    def resolve(self, instance: Instance[Any], target: Type[Any]) -> Instance[Any]:
        """
        Convert an Instance to ``target`` with the one registered cast. An
        Instance resolved to its own Type with no cast registered for that
        pair is returned re-bound unchanged.

        :raises NoCastRegisteredError: If no cast exists for the pair.
        """
        try:
            operation = instance.type.cast_to(target)
        except NoCastRegisteredError as e:
            if target is not instance.type:
                self._hooks.execute_on_error(e)
                raise
            operation = None

        if operation is None:
            result = Instance(self, target, instance.term)
        else:
            result = Instance(self, target, operation.apply(instance.term))
            logger.debug(
                "Resolved %s -> %s via %s",
                instance.type.qualified_name,
                target.qualified_name,
                operation.name,
            )
        self._hooks.execute_on_resolve(instance, target, result)
        return result

    # -------------------------------------------------------------------------
    # Instances and pending results
    # -------------------------------------------------------------------------

    def instance(self, value: Any, type_: Optional[Type[Any]] = None) -> Instance[Any]:
        """
        Bind a value to a Type.

        :param value: A Term, or a raw value wrapped as a One Term.
        :param type_: The Type; required for Terms, inferred from a raw value's class otherwise.
        """
        if isinstance(value, Term):
            if type_ is None:
                raise ValueError("An explicit type is required to bind a Term")
            self._require_owned(type_)
            return Instance(self, type_, value)

        if type_ is None:
            type_ = self.type_of(type(value))
        else:
            self._require_owned(type_)
            if not type_.accepts(value):
                raise ValueError(f"{value!r} is not a {type_.native_class.__name__}")
        return Instance(self, type_, Term.one(value))

    def pending(self, name: Optional[str] = None) -> PendingResult:
        """Create a PendingResult capped by this environment's max_timeout."""
        return PendingResult(max_timeout=self._config.max_timeout, name=name)

    def blocking(self, result: Optional[PendingResult] = None) -> Term[Any]:
        """
        Wrap a pending result as a Blocking Term using the configured default
        timeout, capped by the configured max_timeout.
        """
        if result is None:
            result = self.pending()
        timeout = self._config.default_timeout
        if timeout is not None:
            timeout = min(timeout, self._config.max_timeout)
        return Term.blocking(result, timeout)

    def __repr__(self) -> str:
        return f"TypingEnvironment(root={self._root.name!r}, types={len(self._types_by_id)})"
