# tests/unit/test_multiplicity.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest

from termcast.core.multiplicity import (
    NO_CAUSE,
    Blocking,
    Cancelled,
    Empty,
    Error,
    Many,
    One,
    Partial,
    Timeout,
    canonical,
)
from termcast.core.types import CauseKind, MultiplicityKind


# -----------------------------------------------------------------------------
# CAUSES
# -----------------------------------------------------------------------------
def test_cause_kinds():
    assert NO_CAUSE.kind is CauseKind.NONE
    assert Error("boom").kind is CauseKind.ERROR
    assert Partial((1, 2)).kind is CauseKind.PARTIAL


def test_no_cause_repr():
    assert repr(NO_CAUSE) == "NO_CAUSE"


def test_partial_coerces_elements_to_tuple():
    partial = Partial([1, 2, 3])
    assert partial.elements == (1, 2, 3)
    assert hash(partial) == hash(Partial((1, 2, 3)))


def test_error_details_are_data():
    assert Error(Timeout(1.5)) == Error(Timeout(1.5))
    assert Error(Cancelled()).details.reason == "cancelled"


# -----------------------------------------------------------------------------
# MULTIPLICITIES
# -----------------------------------------------------------------------------
def test_empty_defaults_to_no_cause():
    empty = Empty()
    assert empty.cause is NO_CAUSE
    assert empty.kind is MultiplicityKind.EMPTY


def test_empty_rejects_non_cause():
    with pytest.raises(ValueError):
        Empty("not a cause")


def test_one_exposes_single_element_tuple():
    one = One(42)
    assert one.kind is MultiplicityKind.ONE
    assert one.elements == (42,)


def test_many_requires_two_elements():
    assert Many((1, 2)).elements == (1, 2)
    with pytest.raises(ValueError):
        Many((1,))
    with pytest.raises(ValueError):
        Many(())


def test_many_coerces_list():
    assert Many([1, 2, 3]).elements == (1, 2, 3)


def test_blocking_rejects_negative_timeout(pending):
    with pytest.raises(ValueError):
        Blocking(pending, -1)


def test_blocking_equality_is_by_result_identity(pending):
    from termcast.runtime.pending import PendingResult

    assert Blocking(pending, 1.0) == Blocking(pending, 1.0)
    assert Blocking(pending, 1.0) != Blocking(pending, 2.0)
    assert Blocking(pending) != Blocking(PendingResult())
    assert hash(Blocking(pending, 1.0)) == hash(Blocking(pending, 1.0))


@pytest.mark.parametrize(
    "elements,expected",
    [
        ((), Empty()),
        ((7,), One(7)),
        ((1, 2), Many((1, 2))),
        ((1, 2, 3), Many((1, 2, 3))),
    ],
)
def test_canonical(elements, expected):
    assert canonical(elements) == expected
