# termcast/core/multiplicity.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional, Tuple, Union

from termcast.core.types import CauseKind, MultiplicityKind

if TYPE_CHECKING:
    from termcast.runtime.pending import PendingResult


# -----------------------------------------------------------------------------
# CAUSES
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class NoCause:
    """
    The cause of a plainly empty result.
    """

    @property
    def kind(self) -> CauseKind:
        return CauseKind.NONE

    def __repr__(self) -> str:
        return "NO_CAUSE"


NO_CAUSE = NoCause()


@dataclass(frozen=True)
class Error:
    """
    The cause of a failed evaluation. Details may be an exception, a message,
    or one of the well-known details below (Timeout, Cancelled).
    """

    details: Any

    @property
    def kind(self) -> CauseKind:
        return CauseKind.ERROR


@dataclass(frozen=True)
class Partial:
    """
    The cause of an incomplete evaluation, carrying the elements produced so far.
    """

    elements: Tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "elements", tuple(self.elements))

    @property
    def kind(self) -> CauseKind:
        return CauseKind.PARTIAL


Cause = Union[NoCause, Error, Partial]


@dataclass(frozen=True)
class Timeout:
    """
    Error details for a wait that ran out of time.

    :param seconds: The budget that expired.
    :param partial: Elements the producer had published by then.
    """

    seconds: float
    partial: Tuple[Any, ...] = ()


@dataclass(frozen=True)
class Cancelled:
    """Error details for a wait (or a result) that was abandoned, with the elements published so far."""

    reason: str = "cancelled"
    partial: Tuple[Any, ...] = ()


# -----------------------------------------------------------------------------
# MULTIPLICITIES
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class Empty:
    """
    Zero elements, with an optional cause.
    """

    cause: Cause = NO_CAUSE

    def __post_init__(self) -> None:
        if not isinstance(self.cause, (NoCause, Error, Partial)):
            raise ValueError(f"Empty cause must be NO_CAUSE, Error or Partial, not {self.cause!r}")

    @property
    def kind(self) -> MultiplicityKind:
        return MultiplicityKind.EMPTY


@dataclass(frozen=True)
class One:
    """
    Exactly one element.
    """

    element: Any

    @property
    def kind(self) -> MultiplicityKind:
        return MultiplicityKind.ONE

    @property
    def elements(self) -> Tuple[Any, ...]:
        return (self.element,)


@dataclass(frozen=True)
class Many:
    """
    Two or more elements, in order. Zero elements must be Empty and a single
    element must be One.
    """

    elements: Tuple[Any, ...]

    def __post_init__(self) -> None:
        elements = tuple(self.elements)
        if len(elements) < 2:
            raise ValueError(f"Many requires at least 2 elements, got {len(elements)}; use Empty or One")
        object.__setattr__(self, "elements", elements)

    @property
    def kind(self) -> MultiplicityKind:
        return MultiplicityKind.MANY


@dataclass(frozen=True)
class Blocking:
    """
    A result that is not yet available.

    :param result: The pending result the producer will complete.
    :param timeout: Default await budget in seconds. None defers to the
                    pending result's max_timeout.
    """

    result: "PendingResult" = field(compare=False)
    timeout: Optional[float] = None

    def __post_init__(self) -> None:
        if self.timeout is not None and self.timeout < 0:
            raise ValueError("Blocking timeout must be non-negative")

    @property
    def kind(self) -> MultiplicityKind:
        return MultiplicityKind.BLOCKING

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Blocking):
            return NotImplemented
        return self.result is other.result and self.timeout == other.timeout

    def __hash__(self) -> int:
        return hash((id(self.result), self.timeout))


Multiplicity = Union[Empty, One, Many, Blocking]


def canonical(elements: Tuple[Any, ...]) -> Multiplicity:
    """
    Classify a finished element sequence: 0 -> Empty, 1 -> One, 2+ -> Many.
    """
    if not elements:
        return Empty()
    if len(elements) == 1:
        return One(elements[0])
    return Many(elements)
