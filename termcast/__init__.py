"""termcast: typed terms and explicit casts between native value types

A Term is the outcome of evaluating something: zero, one or many elements, or
a result still being computed elsewhere. A TypingEnvironment names the native
types those elements belong to and holds the single registered cast for each
ordered pair of types.

Responsibilities:
    - Term classification (Just/Unjust, Mutable/Immutable)
    - Namespaced Type registry with get-or-create by native class
    - Exactly-once cast registration and one-hop resolution
    - Blocking results with bounded timeouts and cancellation

Cross-cutting Concerns:
    Thread Safety:
        - Environment mutation serialized by one writer lock
        - Lookups are lock-free

    Error Handling:
        - Structured error hierarchy rooted at TermcastError
        - Timeouts and cancellation reported as Error Terms, never raised

    Logging:
        - Module loggers only; handlers are left to the application
"""

from termcast.core.errors import (
    CastingError,
    DuplicateCastError,
    DuplicateSubtypeError,
    EnvironmentInitError,
    NamespaceError,
    NoCastRegisteredError,
    NotJustError,
    NotUnjustError,
    PendingError,
    ResultAlreadyCompletedError,
    TermcastError,
    TermError,
    UnknownSubtypeError,
    UnknownTypeError,
)
from termcast.core.instance import Instance
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
)
from termcast.core.operation import Cast, Operation
from termcast.core.term import Term
from termcast.core.type_def import Type
from termcast.core.types import CauseKind, Definiteness, Idempotence, MultiplicityKind, TypeId
from termcast.runtime.config import EnvironmentConfig
from termcast.runtime.environment import TypingEnvironment
from termcast.runtime.hooks import HookManager, LoggingHook
from termcast.runtime.pending import PendingResult

__version__ = "0.1.0"

__all__ = [
    "NO_CAUSE",
    "Blocking",
    "Cancelled",
    "Cast",
    "CastingError",
    "CauseKind",
    "Definiteness",
    "DuplicateCastError",
    "DuplicateSubtypeError",
    "Empty",
    "EnvironmentConfig",
    "EnvironmentInitError",
    "Error",
    "HookManager",
    "Idempotence",
    "Instance",
    "LoggingHook",
    "Many",
    "MultiplicityKind",
    "NamespaceError",
    "NoCastRegisteredError",
    "NotJustError",
    "NotUnjustError",
    "One",
    "Operation",
    "Partial",
    "PendingError",
    "PendingResult",
    "ResultAlreadyCompletedError",
    "Term",
    "TermError",
    "TermcastError",
    "Timeout",
    "Type",
    "TypeId",
    "TypingEnvironment",
    "UnknownSubtypeError",
    "UnknownTypeError",
]
