"""Destination cells and the value wrappers a flag set writes through."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar

from src.flagbind.adapters import Adapter

T = TypeVar("T")


@dataclass
class Destination(Generic[T]):
    """
    Mutable cell holding a flag's default before parsing and its resolved value after.

    The same instance is shared by the flag and its :class:`GenericValue`, so a
    write through either is visible through both.
    """

    value: T


class FlagValue(Protocol):
    """What a :class:`~src.flagbind.flagset.FlagSet` needs from a registered value."""

    def set(self, text: str) -> None: ...

    def get(self) -> Any: ...

    def is_bool_flag(self) -> bool: ...

    def __str__(self) -> str: ...


class GenericValue(Generic[T]):
    """Adapts a destination cell and a conversion adapter to the flag-set value protocol."""

    def __init__(self, destination: Destination[T], adapter: Adapter) -> None:
        self.destination = destination
        self.adapter = adapter
        self._has_been_set = False

    def set(self, text: str) -> None:
        """
        Parse *text* and store it in the destination.

        Raises:
            ValueConstraintError: If the adapter rejects *text*; the destination is left untouched.
        """
        self.destination.value = self.adapter.parse(text)
        self._has_been_set = True

    def get(self) -> T:
        return self.destination.value

    def is_set(self) -> bool:
        return self._has_been_set

    def is_bool_flag(self) -> bool:
        return False

    def __str__(self) -> str:
        return self.adapter.format(self.destination.value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.adapter.name}={str(self)!r})"


class BoolValue(GenericValue[bool]):
    """Value wrapper for switches that do not consume a separate argument token."""

    def is_bool_flag(self) -> bool:
        return True


__all__ = ["BoolValue", "Destination", "FlagValue", "GenericValue"]
