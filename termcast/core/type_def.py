# termcast/core/type_def.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Generic, Optional, Sequence, Type as PyType

from termcast.core.errors import (
    DuplicateCastError,
    DuplicateSubtypeError,
    NoCastRegisteredError,
    UnknownSubtypeError,
)
from termcast.core.operation import Cast
from termcast.core.types import TypeId, V
from termcast.runtime.concurrency import get_rlock, with_lock

if TYPE_CHECKING:
    from termcast.interfaces.protocols import TermOperation

logger = logging.getLogger(__name__)


class Type(Generic[V]):
    """
    A named, namespaced descriptor of a native value kind.

    A Type owns an ordered symbol table of named child Types and the outbound
    casts registered from it. Both only ever grow: nothing is removed, renamed
    or overwritten. Mutation happens under the owning environment's writer
    lock; lookups are plain dictionary reads.
    """

    def __init__(
        self,
        name: str,
        native_class: PyType[V],
        path: Sequence[str] = (),
        lock: Optional[Any] = None,
    ) -> None:
        """
        :param name: Name of this Type within its parent namespace.
        :param native_class: The Python class of values this Type describes.
        :param path: Names of the enclosing namespaces, outermost first.
        :param lock: Writer lock shared with the owning environment.
        """
        if not name or not isinstance(name, str):
            raise ValueError("Type name must be a non-empty string")
        if "." in name:
            raise ValueError(f"Type name must not contain '.': {name!r}")
        if not isinstance(native_class, type):
            raise ValueError(f"Native class must be a class, not {native_class!r}")

        self._id = TypeId(tuple(path), name)
        self._native_class = native_class
        self._children: Dict[str, "Type[Any]"] = {}
        self._casts: Dict[TypeId, "TermOperation"] = {}
        self._lock = lock if lock is not None else get_rlock()

    @property
    def id(self) -> TypeId:
        return self._id

    @property
    def name(self) -> str:
        return self._id.name

    @property
    def path(self) -> tuple:
        return self._id.path

    @property
    def qualified_name(self) -> str:
        return self._id.qualified()

    @property
    def native_class(self) -> PyType[V]:
        return self._native_class

    def accepts(self, value: Any) -> bool:
        """Check whether a raw value is an instance of this Type's native class."""
        return isinstance(value, self._native_class)

    # -------------------------------------------------------------------------
    # Symbol table
    # -------------------------------------------------------------------------

    def child(self, name: str) -> "Type[Any]":
        """
        Look up a named sub-type.

        :raises UnknownSubtypeError: If no child has that name.
        """
        child = self._children.get(name)
        if child is None:
            raise UnknownSubtypeError(
                f"Type '{self.qualified_name}' has no sub-type '{name}'", name, self
            )
        return child

    def has_child(self, name: str) -> bool:
        return name in self._children

    def children(self) -> Dict[str, "Type[Any]"]:
        """Return a copy of the symbol table, in registration order."""
        return dict(self._children)

    def add_child(self, name: str, child: "Type[Any]") -> None:
        """
        Register a named sub-type exactly once.

        :raises DuplicateSubtypeError: If the name is already registered.
        """
        if not isinstance(child, Type):
            raise ValueError(f"Child of '{self.qualified_name}' must be a Type, not {child!r}")
        with with_lock(self._lock):
            if name in self._children:
                raise DuplicateSubtypeError(
                    f"Type '{self.qualified_name}' already has a sub-type '{name}'", name, self
                )
            self._children[name] = child
        logger.debug("Added sub-type %s to %s", name, self.qualified_name)

    # -------------------------------------------------------------------------
    # Casts
    # -------------------------------------------------------------------------

    def register_cast(self, target: "Type[Any]", operation: "TermOperation") -> None:
        """
        Register the outbound cast from this Type to ``target``.

        :raises DuplicateCastError: If a cast to ``target`` already exists.
        :raises ValueError: If a Cast declares endpoints other than (self, target).
        """
        if not isinstance(target, Type):
            raise ValueError(f"Cast target must be a Type, not {target!r}")
        if not callable(getattr(operation, "apply", None)):
            raise ValueError(f"Cast operation must provide apply(), got {operation!r}")
        if isinstance(operation, Cast) and (operation.source is not self or operation.target is not target):
            raise ValueError(
                f"{operation!r} does not convert {self.qualified_name} -> {target.qualified_name}"
            )

        with with_lock(self._lock):
            if target.id in self._casts:
                raise DuplicateCastError(
                    f"A cast {self.qualified_name} -> {target.qualified_name} is already registered",
                    self,
                    target,
                )
            self._casts[target.id] = operation
        logger.debug("Registered cast %s -> %s: %r", self.qualified_name, target.qualified_name, operation)

    def cast_to(self, target: "Type[Any]") -> "TermOperation":
        """
        Return the operation registered for (self, target). Lookup is one hop;
        casts are never composed.

        :raises NoCastRegisteredError: If no such cast is registered.
        """
        operation = self._casts.get(target.id)
        if operation is None:
            raise NoCastRegisteredError(
                f"No cast registered from {self.qualified_name} to {target.qualified_name}",
                self,
                target,
            )
        return operation

    def has_cast(self, target: "Type[Any]") -> bool:
        return target.id in self._casts

    def casts(self) -> Dict[TypeId, "TermOperation"]:
        """Return a copy of the outbound casts, keyed by target TypeId."""
        return dict(self._casts)

    def __repr__(self) -> str:
        return f"Type({self.qualified_name!r}, {self._native_class.__name__})"
