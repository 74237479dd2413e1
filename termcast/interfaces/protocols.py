# termcast/interfaces/protocols.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import TYPE_CHECKING, Any, Iterable, Protocol, runtime_checkable

if TYPE_CHECKING:
    from termcast.core.instance import Instance
    from termcast.core.term import Term
    from termcast.core.type_def import Type


@runtime_checkable
class MutableSource(Protocol):
    """
    Backing source of a Mutable Term.

    Methods:
        snapshot(): Returns the elements visible right now.

    Runtime Invariants:
    - Each call returns one consistent view of the elements.
    - Synchronizing concurrent writers is the source's own responsibility.
    """

    def snapshot(self) -> Iterable[Any]:
        """Return the current elements, in order."""
        ...


@runtime_checkable
class TermOperation(Protocol):
    """
    Operation protocol for type checking.

    Methods:
        name: The operation's name, part of a cast's identity.
        apply(term): Transforms one Term into another.

    Error Handling:
    - Expected failures are returned as Unjust Terms, never raised.
    """

    @property
    def name(self) -> str: ...

    def apply(self, term: "Term") -> "Term": ...


@runtime_checkable
class EnvironmentHook(Protocol):
    """
    Hook protocol for observing a typing environment.

    A hook may define any subset of these methods; the environment calls only
    the ones present.
    """

    def on_type_created(self, type_: "Type") -> None: ...

    def on_cast_registered(self, source: "Type", target: "Type", operation: TermOperation) -> None: ...

    def on_resolve(self, instance: "Instance", target: "Type", result: "Instance") -> None: ...

    def on_error(self, error: Exception) -> None: ...
