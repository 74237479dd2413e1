# termcast/runtime/builtins.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""Built-in type system: Types for the common Python scalars and the casts between them."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Callable, Dict, Tuple

from termcast.core.operation import Cast

if TYPE_CHECKING:
    from termcast.core.type_def import Type
    from termcast.runtime.environment import TypingEnvironment

logger = logging.getLogger(__name__)

BUILTIN_CLASSES: Tuple[type, ...] = (int, float, str, bool, bytes, Decimal)


def _decode_utf8(value: bytes) -> str:
    return value.decode("utf-8")


def _encode_utf8(value: str) -> bytes:
    return value.encode("utf-8")


# (source, target, name, element function)
BUILTIN_CASTS: Tuple[Tuple[type, type, str, Callable[[Any], Any]], ...] = (
    (int, str, "int_to_str", str),
    (str, int, "str_to_int", int),
    (float, str, "float_to_str", str),
    (str, float, "str_to_float", float),
    (int, float, "int_to_float", float),
    (bool, int, "bool_to_int", int),
    (int, bool, "int_to_bool", bool),
    (bool, str, "bool_to_str", str),
    (bytes, str, "bytes_to_str", _decode_utf8),
    (str, bytes, "str_to_bytes", _encode_utf8),
    (Decimal, str, "decimal_to_str", str),
    (str, Decimal, "str_to_decimal", Decimal),
    (int, Decimal, "int_to_decimal", Decimal),
)


def install_builtins(environment: "TypingEnvironment") -> Dict[type, "Type[Any]"]:
    """
    Register the built-in Types and casts in ``environment``.

    Conversions are element-wise; an element that fails to convert turns the
    whole result into an Error Term carrying the exception.

    :return: The installed Types, keyed by native class.
    :raises DuplicateCastError: If any built-in cast is already registered.
    """
    types = {cls: environment.type_of(cls) for cls in BUILTIN_CLASSES}
    for source, target, name, function in BUILTIN_CASTS:
        environment.register(Cast.elementwise(name, types[source], types[target], function))
    logger.debug("Installed %d built-in types and %d casts", len(types), len(BUILTIN_CASTS))
    return types
