# termcast/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Type


class TermcastError(Exception):
    """
    Base exception class for errors raised by the term and typing runtime.

    :param message: Human readable description of the failure.
    :param details: Optional dictionary of structured context.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


# -----------------------------------------------------------------------------
# TERM ERRORS
# -----------------------------------------------------------------------------


class TermError(TermcastError):
    """
    Raised when a Term is asked for something inconsistent with its
    definiteness.
    """

    def __init__(self, message: str, term: Any = None, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, details)
        self.term = term


class NotJustError(TermError):
    """
    Raised when elements are requested from an Unjust Term (Empty or Blocking).
    """


class NotUnjustError(TermError):
    """
    Raised when a cause is requested from a Just Term (One or Many).
    """


# -----------------------------------------------------------------------------
# NAMESPACE ERRORS
# -----------------------------------------------------------------------------


class NamespaceError(TermcastError):
    """
    Raised on misuse of a Type's symbol table.
    """

    def __init__(
        self, message: str, name: str, parent: Any = None, details: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message, details)
        self.name = name
        self.parent = parent


class UnknownSubtypeError(NamespaceError):
    """
    Raised when a named child Type does not exist.
    """


class DuplicateSubtypeError(NamespaceError):
    """
    Raised when a child name is registered a second time.
    """


# -----------------------------------------------------------------------------
# CASTING ERRORS
# -----------------------------------------------------------------------------


class CastingError(TermcastError):
    """
    Base class for cast registration and lookup failures.
    """


class UnknownTypeError(CastingError):
    """
    Raised when a Type (or a reference to one) is not owned by the environment.
    """

    def __init__(self, message: str, type_ref: Any = None, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, details)
        self.type_ref = type_ref


class _CastPairError(CastingError):
    def __init__(
        self, message: str, source: Any = None, target: Any = None, details: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message, details)
        self.source = source
        self.target = target


class NoCastRegisteredError(_CastPairError):
    """
    Raised when no cast exists for an ordered (source, target) pair.
    Callers are expected to handle this, for example by falling back to
    another representation.
    """


class DuplicateCastError(_CastPairError):
    """
    Raised when a second cast is registered for an ordered (source, target) pair.
    """


# -----------------------------------------------------------------------------
# PENDING RESULT ERRORS
# -----------------------------------------------------------------------------


class PendingError(TermcastError):
    """
    Base class for misuse of a pending (Blocking) result by its producer.
    """


class ResultAlreadyCompletedError(PendingError):
    """
    Raised when a producer completes a pending result more than once.
    """


# -----------------------------------------------------------------------------
# ENVIRONMENT ERRORS
# -----------------------------------------------------------------------------


class EnvironmentInitError(TermcastError):
    """
    Raised when a typing environment cannot be fully constructed. This is
    fatal: no partially initialized environment is ever returned.
    """


@dataclass(frozen=True)
class ErrorContext:
    """
    Immutable snapshot of an error, handed to hooks and diagnostics.
    """

    error_type: Type[TermcastError]
    timestamp: float
    traceback: str
    details: Dict[str, Any] = field(default_factory=dict)


def create_error_context(error: TermcastError, traceback: str) -> ErrorContext:
    """
    Build an ErrorContext for the given error.

    :param error: The error being reported.
    :param traceback: Formatted traceback text.
    """
    return ErrorContext(
        error_type=type(error),
        timestamp=time.time(),
        traceback=traceback,
        details=dict(error.details),
    )
