# termcast/core/operation.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Generic, Tuple

from termcast.core.multiplicity import Blocking, Empty, Partial, canonical
from termcast.core.term import Term
from termcast.core.types import IN, OUT, ElementFunction, TypeId

if TYPE_CHECKING:
    from termcast.core.type_def import Type

logger = logging.getLogger(__name__)


class Operation(Generic[IN, OUT]):
    """
    A named, stateless transformation from one Term to another.

    apply() is total: an exception raised by the wrapped function is returned
    as an Error Term instead of propagating. Applied to a Blocking Term, the
    operation is piped onto the pending result and a new Blocking Term is
    returned.
    """

    def __init__(self, name: str, function: Callable[[Term[IN]], Term[OUT]]) -> None:
        """
        :param name: Name identifying this operation.
        :param function: Callable mapping a finished Term to a new Term.
        """
        if not name or not isinstance(name, str):
            raise ValueError("Operation name must be a non-empty string")
        if not callable(function):
            raise ValueError("Operation function must be callable")
        self._name = name
        self._function = function

    @classmethod
    def elementwise(cls, name: str, function: ElementFunction) -> "Operation":
        """
        Build an operation from a per-element function. Unjust Terms pass
        through, except that Partial elements are converted as well.
        """
        return cls(name, _ElementMapper(function))

    @property
    def name(self) -> str:
        return self._name

    def apply(self, term: Term[IN]) -> Term[OUT]:
        """
        Apply this operation to a Term.

        :param term: The input Term.
        :return: The output Term; an Error Term if the function raised.
        :raises TypeError: If the function returns something other than a Term.
        """
        if term.is_blocking():
            from termcast.runtime.pending import pipe

            return pipe(term, self)

        try:
            result = self._function(term)
        except Exception as e:
            logger.debug("Operation %s failed on %r: %s", self._name, term, e)
            return Term.error(e)

        if not isinstance(result, Term):
            raise TypeError(f"Operation {self._name} returned {type(result).__name__}, expected Term")
        return result

    def __call__(self, term: Term[IN]) -> Term[OUT]:
        return self.apply(term)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r})"


class Cast(Operation[IN, OUT]):
    """
    An Operation converting Terms of a source Type into Terms of a target Type.
    Its declared (source, target) pair is its registration key.
    """

    def __init__(
        self,
        name: str,
        source: "Type[IN]",
        target: "Type[OUT]",
        function: Callable[[Term[IN]], Term[OUT]],
    ) -> None:
        """
        :param name: Name identifying this cast.
        :param source: Type converted from.
        :param target: Type converted to.
        :param function: Callable mapping a finished Term to a new Term.
        """
        super().__init__(name, function)
        if source is None or target is None:
            raise ValueError("Cast must declare a source and a target type")
        self._source = source
        self._target = target

    @classmethod
    def elementwise(  # type: ignore[override]
        cls, name: str, source: "Type[IN]", target: "Type[OUT]", function: ElementFunction
    ) -> "Cast[IN, OUT]":
        return cls(name, source, target, _ElementMapper(function))

    @property
    def source(self) -> "Type[IN]":
        return self._source

    @property
    def target(self) -> "Type[OUT]":
        return self._target

    @property
    def id(self) -> Tuple[TypeId, TypeId, str]:
        return (self._source.id, self._target.id, self._name)

    def __repr__(self) -> str:
        return f"Cast({self._name!r}, {self._source.qualified_name} -> {self._target.qualified_name})"


class _ElementMapper:
    """
    Internal adapter lifting a per-element function to a Term function.
    """

    def __init__(self, function: ElementFunction) -> None:
        if not callable(function):
            raise ValueError("Element function must be callable")
        self._function = function

    def __call__(self, term: Term) -> Term:
        multiplicity = term.multiplicity
        if isinstance(multiplicity, Empty):
            if isinstance(multiplicity.cause, Partial):
                return Term.partial(self._function(e) for e in multiplicity.cause.elements)
            return term.idempotent()
        if isinstance(multiplicity, Blocking):
            return term
        return Term(canonical(tuple(self._function(e) for e in multiplicity.elements)))
