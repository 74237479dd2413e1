# termcast/core/instance.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, Optional

from termcast.core.term import Term
from termcast.core.types import V

if TYPE_CHECKING:
    from termcast.core.type_def import Type
    from termcast.runtime.environment import TypingEnvironment


class Instance(Generic[V]):
    """
    An immutable binding of one Type to one Term, plus the environment used to
    convert it to other Types.
    """

    __slots__ = ("_environment", "_type", "_term")

    def __init__(self, environment: "TypingEnvironment", type_: "Type[V]", term: Term[V]) -> None:
        if environment is None:
            raise ValueError("Instance requires a typing environment")
        if type_ is None:
            raise ValueError("Instance requires a type")
        if not isinstance(term, Term):
            raise ValueError(f"Instance requires a Term, not {term!r}")
        self._environment = environment
        self._type = type_
        self._term = term

    @property
    def environment(self) -> "TypingEnvironment":
        return self._environment

    @property
    def type(self) -> "Type[V]":
        return self._type

    @property
    def term(self) -> Term[V]:
        return self._term

    def value(self, target: Optional["Type[Any]"] = None) -> Term[Any]:
        """
        Return the bound Term, or the Term converted to ``target``.

        :raises NoCastRegisteredError: If no cast exists from this Type to ``target``.
        """
        if target is None:
            return self._term
        return self._environment.resolve(self, target).term

    def cast(self, target: "Type[Any]") -> "Instance[Any]":
        """Return a new Instance of ``target`` holding the converted Term."""
        return self._environment.resolve(self, target)

    def __repr__(self) -> str:
        return f"Instance({self._type.qualified_name}, {self._term!r})"
