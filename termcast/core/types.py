"""
Type definitions and enums for terms and casting.

This module contains shared enums and aliases used across the term,
operation and typing modules. It helps break circular dependencies
between modules and provides a central location for type information.

Design:
- No runtime dependencies on other modules
- Only contains type definitions and enums
- Used by multiplicity.py, term.py, operation.py and type_def.py
- Provides type hints for static analysis
"""

from enum import Enum, auto
from typing import Any, Callable, NamedTuple, Tuple, TypeVar


class MultiplicityKind(Enum):
    """Defines the mutually exclusive states of a computed result.

    Used to pattern-match a Term's content without inspecting classes.
    """
    EMPTY = auto()     # Zero elements, optionally with a cause
    ONE = auto()       # Exactly one element
    MANY = auto()      # Two or more elements, ordered
    BLOCKING = auto()  # Result not yet available


class Definiteness(Enum):
    """Defines whether a Term is guaranteed to hold elements.

    JUST terms are One or Many; UNJUST terms are Empty or Blocking.
    """
    JUST = auto()
    UNJUST = auto()


class Idempotence(Enum):
    """Defines whether repeated reads of a Term can change.

    IMMUTABLE terms always yield the same elements; MUTABLE terms read
    through to a backing source on every access.
    """
    IMMUTABLE = auto()
    MUTABLE = auto()


class CauseKind(Enum):
    """Defines why an Empty multiplicity has no elements."""
    NONE = auto()     # Plainly empty
    ERROR = auto()    # Evaluation failed
    PARTIAL = auto()  # Only some elements were produced


class TypeId(NamedTuple):
    """Identity of a Type within a typing environment."""
    path: Tuple[str, ...]
    name: str

    def qualified(self) -> str:
        return ".".join(self.path + (self.name,)) if self.path else self.name


# Type variables for generic type hints
V = TypeVar('V')
IN = TypeVar('IN')
OUT = TypeVar('OUT')

# Type aliases for common types
CastKey = Tuple[TypeId, TypeId]
ElementFunction = Callable[[Any], Any]
