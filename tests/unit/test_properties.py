# tests/unit/test_properties.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""Property-based tests for Term classification and cast registration."""
import pytest
from hypothesis import given
from hypothesis import strategies as st

from termcast.core.errors import DuplicateCastError, NotJustError, NotUnjustError
from termcast.core.operation import Cast
from termcast.core.term import Term
from termcast.runtime.environment import TypingEnvironment

elements = st.lists(st.one_of(st.integers(), st.text(max_size=5)), max_size=10)

unjust_terms = st.one_of(
    st.just(Term.empty()),
    st.text(max_size=5).map(Term.error),
    elements.map(Term.partial),
    st.floats(min_value=0, max_value=10).map(Term.timeout),
)


@given(elements)
def test_just_and_unjust_are_exclusive(values):
    term = Term.from_iterable(values)
    assert term.is_just() != term.is_unjust()
    assert term.is_just() == (len(values) > 0)


@given(elements)
def test_mutable_and_immutable_are_exclusive(values):
    for term in (Term.from_iterable(values), Term.mutable(lambda: values)):
        assert term.is_mutable() != term.is_immutable()


@given(elements.filter(bool))
def test_just_terms_expose_elements_not_cause(values):
    term = Term.from_iterable(values)
    assert term.elements() == tuple(values)
    with pytest.raises(NotUnjustError):
        term.cause()


@given(unjust_terms)
def test_unjust_terms_expose_cause_not_elements(term):
    term.cause()
    with pytest.raises(NotJustError):
        term.elements()


@given(elements)
def test_idempotent_law(values):
    source = list(values)
    mutable = Term.mutable(lambda: source)
    snapshot = mutable.idempotent()

    assert snapshot.is_immutable()
    assert snapshot.multiplicity == Term.from_iterable(values).multiplicity
    assert snapshot.idempotent() is snapshot

    source.append("later")
    assert snapshot.multiplicity == Term.from_iterable(values).multiplicity


@given(st.lists(st.text(min_size=1, max_size=8), min_size=2, max_size=5))
def test_second_registration_always_fails(names):
    env = TypingEnvironment()
    int_type, str_type = env.type_of(int), env.type_of(str)
    first = Cast.elementwise(names[0], int_type, str_type, str)
    env.register(first)

    for name in names[1:]:
        with pytest.raises(DuplicateCastError):
            env.register(Cast.elementwise(name, int_type, str_type, repr))
    assert int_type.cast_to(str_type) is first


@given(st.integers())
def test_cast_round_trip(value):
    env = TypingEnvironment()
    int_type, str_type = env.type_of(int), env.type_of(str)
    env.register(Cast.elementwise("to_str", int_type, str_type, str))
    env.register(Cast.elementwise("to_int", str_type, int_type, int))

    as_str = env.instance(value).cast(str_type)
    assert as_str.cast(int_type).term == Term.one(value)
