"""Ordered collections of flags applied to a single flag set."""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, Protocol, Sequence

from src.flagbind.errors import RegistrationError
from src.flagbind.flagset import FlagSet


class Flag(Protocol):
    """Introspection contract shared by every flag kind."""

    name: str
    hidden: bool

    def apply(self, flag_set: FlagSet) -> None: ...

    def names(self) -> List[str]: ...

    def get_value(self) -> str: ...

    def is_set(self) -> bool: ...

    def get_initial_text_value(self) -> str: ...

    def get_default_text(self) -> str: ...

    def get_env_vars(self) -> List[str]: ...

    def get_env_source(self) -> Optional[str]: ...

    def get_usage(self) -> str: ...

    def is_bool_flag(self) -> bool: ...

    def takes_value(self) -> bool: ...

    def kind_name(self) -> str: ...


class Flags:
    """Keeps flags in declaration order and applies them together."""

    def __init__(self, flags: Iterable[Flag] = ()) -> None:
        self._flags: List[Flag] = []
        self.add(*flags)

    def add(self, *flags: Flag) -> None:
        """
        Append *flags*, rejecting any name or alias already in use.

        Raises:
            RegistrationError: On a name clash within the collection.
        """
        for flag in flags:
            for name in flag.names():
                if self.get(name) is not None:
                    raise RegistrationError(f"flag redefined: {name}")
            self._flags.append(flag)

    def get(self, name: str) -> Optional[Flag]:
        """Return the flag answering to *name* (primary name or alias)."""

        for flag in self._flags:
            if name in flag.names():
                return flag
        return None

    def names(self) -> List[str]:
        return [name for flag in self._flags for name in flag.names()]

    def visible(self) -> "Flags":
        return Flags(flag for flag in self._flags if not flag.hidden)

    def sorted(self) -> "Flags":
        return Flags(sorted(self._flags, key=lambda flag: flag.name))

    def apply(self, flag_set: FlagSet) -> None:
        """Apply each flag in order; the first failure propagates and stops the walk."""

        for flag in self._flags:
            flag.apply(flag_set)

    def parse(self, arguments: Optional[Sequence[str]], *, set_name: str = "") -> FlagSet:
        """Apply every flag to a fresh :class:`FlagSet`, parse *arguments* and return the set."""

        flag_set = FlagSet(set_name)
        self.apply(flag_set)
        flag_set.parse(arguments)
        return flag_set

    def __iter__(self) -> Iterator[Flag]:
        return iter(self._flags)

    def __len__(self) -> int:
        return len(self._flags)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None


__all__ = ["Flag", "Flags"]
