# termcast/core/term.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Term: the outcome of evaluating something.

A Term carries exactly one Multiplicity (Empty, One, Many or Blocking) and two
orthogonal tags:

- Definiteness: JUST (One/Many) or UNJUST (Empty/Blocking).
- Idempotence: IMMUTABLE (fixed multiplicity) or MUTABLE (reads through to a
  backing source on every access).

The tags are plain enums checked by comparison, so all four combinations are
expressed by the one Term class.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, Iterable, Iterator, Optional, Tuple

from termcast.core.errors import NotJustError, NotUnjustError
from termcast.core.multiplicity import (
    NO_CAUSE,
    Blocking,
    Cancelled,
    Cause,
    Empty,
    Error,
    Many,
    Multiplicity,
    One,
    Partial,
    Timeout,
    canonical,
)
from termcast.core.types import Definiteness, Idempotence, MultiplicityKind, V

if TYPE_CHECKING:
    from threading import Event

    from termcast.interfaces.protocols import MutableSource
    from termcast.runtime.pending import PendingResult

_JUST_KINDS = (MultiplicityKind.ONE, MultiplicityKind.MANY)


class Term(Generic[V]):
    """
    Container for the result of an evaluation.

    Immutable Terms hold one fixed Multiplicity. Mutable Terms hold a source
    and classify one fresh snapshot of it on every read; idempotent() freezes
    such a snapshot into an immutable Term.
    """

    def __init__(self, multiplicity: Multiplicity) -> None:
        """
        :param multiplicity: The fixed content of this (immutable) Term.
        """
        if not isinstance(multiplicity, (Empty, One, Many, Blocking)):
            raise ValueError(f"Term requires a Multiplicity, not {multiplicity!r}")
        self._multiplicity: Optional[Multiplicity] = multiplicity
        self._source: Optional["MutableSource"] = None

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def one(cls, element: V) -> "Term[V]":
        return cls(One(element))

    @classmethod
    def many(cls, elements: Iterable[V]) -> "Term[V]":
        """Build a Many Term; raises ValueError for fewer than 2 elements."""
        return cls(Many(tuple(elements)))

    @classmethod
    def of(cls, *elements: V) -> "Term[V]":
        """Build the canonical Term for the given elements."""
        return cls(canonical(elements))

    @classmethod
    def from_iterable(cls, elements: Iterable[V]) -> "Term[V]":
        """Build the canonical Term for the elements of an iterable."""
        return cls(canonical(tuple(elements)))

    @classmethod
    def empty(cls) -> "Term[Any]":
        return cls(Empty())

    @classmethod
    def error(cls, details: Any) -> "Term[Any]":
        return cls(Empty(Error(details)))

    @classmethod
    def partial(cls, elements: Iterable[Any] = ()) -> "Term[Any]":
        return cls(Empty(Partial(tuple(elements))))

    @classmethod
    def timeout(cls, seconds: float, partial: Iterable[Any] = ()) -> "Term[Any]":
        return cls(Empty(Error(Timeout(seconds, tuple(partial)))))

    @classmethod
    def cancelled(cls, reason: str = "cancelled", partial: Iterable[Any] = ()) -> "Term[Any]":
        return cls(Empty(Error(Cancelled(reason, tuple(partial)))))

    @classmethod
    def blocking(cls, result: "PendingResult", timeout: Optional[float] = None) -> "Term[Any]":
        """
        Build a Blocking Term over a pending result.

        :param result: The producer-side handle.
        :param timeout: Default await budget; falls back to the result's max_timeout.
        """
        if timeout is None:
            timeout = result.max_timeout
        return cls(Blocking(result, timeout))

    @classmethod
    def mutable(cls, source: "MutableSource") -> "Term[Any]":
        """
        Build a Mutable Term reading through to ``source``, which is either an
        object with a ``snapshot()`` method or a zero-argument callable.
        """
        if not (callable(getattr(source, "snapshot", None)) or callable(source)):
            raise ValueError("Mutable source must be callable or provide snapshot()")
        term = cls.__new__(cls)
        term._multiplicity = None
        term._source = source
        return term

    # -------------------------------------------------------------------------
    # Classification
    # -------------------------------------------------------------------------

    def _read_source(self) -> Tuple[Any, ...]:
        snapshot = getattr(self._source, "snapshot", None)
        if callable(snapshot):
            return tuple(snapshot())
        return tuple(self._source())

    @property
    def multiplicity(self) -> Multiplicity:
        """The current multiplicity (a fresh snapshot for Mutable Terms)."""
        if self._source is not None:
            return canonical(self._read_source())
        return self._multiplicity

    @property
    def idempotence(self) -> Idempotence:
        return Idempotence.MUTABLE if self._source is not None else Idempotence.IMMUTABLE

    @property
    def definiteness(self) -> Definiteness:
        if self.multiplicity.kind in _JUST_KINDS:
            return Definiteness.JUST
        return Definiteness.UNJUST

    def is_just(self) -> bool:
        return self.definiteness is Definiteness.JUST

    def is_unjust(self) -> bool:
        return self.definiteness is Definiteness.UNJUST

    def is_mutable(self) -> bool:
        return self._source is not None

    def is_immutable(self) -> bool:
        return self._source is None

    def is_blocking(self) -> bool:
        return self.multiplicity.kind is MultiplicityKind.BLOCKING

    def is_empty(self) -> bool:
        return self.multiplicity.kind is MultiplicityKind.EMPTY

    def has_value(self) -> bool:
        return self.is_just()

    # -------------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------------

    def elements(self) -> Tuple[V, ...]:
        """
        Return the ordered elements of a Just Term.

        :raises NotJustError: If this Term is Empty or Blocking.
        """
        multiplicity = self.multiplicity
        if multiplicity.kind in _JUST_KINDS:
            return multiplicity.elements
        raise NotJustError(f"{multiplicity.kind.name} term has no elements", term=self)

    def cause(self) -> Cause:
        """
        Return why an Unjust Term has no elements. Blocking Terms report NO_CAUSE.

        :raises NotUnjustError: If this Term is One or Many.
        """
        multiplicity = self.multiplicity
        if isinstance(multiplicity, Empty):
            return multiplicity.cause
        if isinstance(multiplicity, Blocking):
            return NO_CAUSE
        raise NotUnjustError(f"{multiplicity.kind.name} term has no cause", term=self)

    def idempotent(self) -> "Term[V]":
        """
        Return an Immutable Term. Mutable Terms are snapshotted once; Immutable
        Terms return themselves.
        """
        if self._source is None:
            return self
        return Term(canonical(self._read_source()))

    def head(self, count: Optional[int] = None) -> "Term[V]":
        """
        Return the first element (or the first ``count`` elements) as a Term.
        Unjust Terms are returned as they are.
        """
        if count is not None and count < 0:
            raise ValueError("count must be greater than or equal to 0")
        multiplicity = self.multiplicity
        if multiplicity.kind not in _JUST_KINDS:
            return self if self._source is None else Term(multiplicity)
        return Term(canonical(multiplicity.elements[: 1 if count is None else count]))

    def or_default(self, default: Any) -> Any:
        multiplicity = self.multiplicity
        if multiplicity.kind in _JUST_KINDS:
            return multiplicity.elements[0]
        return default

    def or_none(self) -> Optional[V]:
        return self.or_default(None)

    def or_raise(self) -> V:
        """
        Return the first element.

        :raises Exception: The error details, when an Error cause carries an exception.
        :raises NotJustError: Otherwise, when this Term has no elements.
        """
        multiplicity = self.multiplicity
        if multiplicity.kind in _JUST_KINDS:
            return multiplicity.elements[0]
        if isinstance(multiplicity, Empty) and isinstance(multiplicity.cause, Error):
            details = multiplicity.cause.details
            if isinstance(details, BaseException):
                raise details
        raise NotJustError(f"{multiplicity.kind.name} term has no elements", term=self)

    # -------------------------------------------------------------------------
    # Blocking
    # -------------------------------------------------------------------------

    def poll(self) -> "Term[V]":
        """
        Check a Blocking Term once without waiting. Returns the final Term if
        the producer has completed, otherwise this Term.
        """
        multiplicity = self.multiplicity
        if isinstance(multiplicity, Blocking):
            final = multiplicity.result.poll()
            if final is not None:
                return final
        return self

    def wait(self, timeout: Optional[float] = None, cancel: Optional["Event"] = None) -> "Term[V]":
        """
        Wait for a Blocking Term to complete.

        :param timeout: Seconds to wait; defaults to the Term's own budget.
                        0 polls once.
        :param cancel: Optional threading.Event abandoning the wait when set.
        :return: The final Term, a Timeout error Term or a Cancelled error Term.
        """
        multiplicity = self.multiplicity
        if not isinstance(multiplicity, Blocking):
            return self
        budget = multiplicity.timeout if timeout is None else timeout
        return multiplicity.result.wait(budget, cancel=cancel)

    async def wait_async(self, timeout: Optional[float] = None) -> "Term[V]":
        """
        Asyncio form of wait(). Cancelling the awaiting task leaves the
        producer running.
        """
        multiplicity = self.multiplicity
        if not isinstance(multiplicity, Blocking):
            return self
        budget = multiplicity.timeout if timeout is None else timeout
        return await multiplicity.result.wait_async(budget)

    def partial(self) -> "Term[V]":
        """
        Progress so far: a Blocking Term reports its producer's partial
        elements; any other Term returns itself.
        """
        multiplicity = self.multiplicity
        if isinstance(multiplicity, Blocking):
            return multiplicity.result.partial()
        return self

    # -------------------------------------------------------------------------
    # Python protocols
    # -------------------------------------------------------------------------

    def __iter__(self) -> Iterator[V]:
        multiplicity = self.multiplicity
        if multiplicity.kind in _JUST_KINDS:
            return iter(multiplicity.elements)
        return iter(())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Term):
            return NotImplemented
        if self._source is not None or other._source is not None:
            return self is other
        return self._multiplicity == other._multiplicity

    def __hash__(self) -> int:
        if self._source is not None:
            raise TypeError("Mutable terms are unhashable; use idempotent() first")
        return hash(self._multiplicity)

    def __repr__(self) -> str:
        if self._source is not None:
            return f"Term(mutable {self._source!r})"
        return f"Term({self._multiplicity!r})"
