# tests/integration/test_end_to_end.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest

from termcast import (
    Cast,
    EnvironmentConfig,
    NoCastRegisteredError,
    Term,
    TypingEnvironment,
)


class Integer(int):
    pass


class Str(str):
    pass


class BoolType:
    pass


@pytest.fixture
def scenario():
    """
    Types Integer, Str and BoolType, with a single registered cast
    Integer -> Str named "stringify".
    """
    env = TypingEnvironment()
    integer, string, boolean = env.type_of(Integer), env.type_of(Str), env.type_of(BoolType)
    env.register(Cast.elementwise("stringify", integer, string, lambda n: Str(str(n))))
    return env, integer, string, boolean


def test_stringify_scenario(scenario):
    env, integer, string, boolean = scenario
    instance = env.instance(Term.one(42), integer)

    assert instance.value() == Term.one(42)
    assert instance.value(string) == Term.one("42")

    with pytest.raises(NoCastRegisteredError):
        instance.value(boolean)


def test_stringify_many(scenario):
    env, integer, string, _ = scenario
    instance = env.instance(Term.of(1, 2, 3), integer)
    assert list(instance.value(string)) == ["1", "2", "3"]


def test_unjust_terms_pass_through_casts(scenario):
    env, integer, string, _ = scenario
    assert env.instance(Term.empty(), integer).value(string) == Term.empty()
    error = Term.error("upstream failure")
    assert env.instance(error, integer).value(string) is error


def test_namespaced_types_with_casts():
    env = TypingEnvironment()
    number = env.subtype(env.root, "number", int)
    celsius = env.subtype(number, "celsius")
    fahrenheit = env.subtype(number, "fahrenheit", float)
    env.register(Cast.elementwise("c_to_f", celsius, fahrenheit, lambda c: c * 9 / 5 + 32))

    reading = env.instance(Term.of(0, 100), env.lookup("number.celsius"))
    assert reading.value(env.lookup("number.fahrenheit")) == Term.of(32.0, 212.0)


def test_builtin_round_trip():
    env = TypingEnvironment(EnvironmentConfig(install_builtins=True))
    str_type, int_type = env.type_of(str), env.type_of(int)
    assert env.instance("123").cast(int_type).cast(str_type).term == Term.one("123")
