"""Minimal command-line flag set that parses tokens into registered values."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence

from src.flagbind.errors import (
    ConversionError,
    DuplicateFlagError,
    FlagParseError,
    RegistrationError,
    ValueConstraintError,
    quote,
)
from src.flagbind.value import FlagValue

logger = logging.getLogger(__name__)


@dataclass
class RegisteredFlag:
    """A value registered under one name, with the text shown as its default."""

    name: str
    value: FlagValue
    usage: str = ""
    default_text: str = ""


class FlagSet:
    """
    Named collection of registered flags and the parser that fills them.

    Accepted forms are ``-name value``, ``--name value`` and ``-name=value``;
    boolean values also accept a bare ``-name``. Parsing stops at ``--`` or at
    the first token that is not a flag; the remainder is available from
    :meth:`args`.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._formal: Dict[str, RegisteredFlag] = {}
        self._actual: Dict[str, RegisteredFlag] = {}
        self._args: List[str] = []
        self._parsed = False

    def var(self, value: FlagValue, name: str, usage: str = "", default_text: Optional[str] = None) -> None:
        """
        Register *value* under *name*.

        Raises:
            RegistrationError: If *name* is empty, malformed or already registered.
        """
        if not name or name.startswith("-") or "=" in name:
            raise RegistrationError(f"flag {quote(name)} has an invalid name")
        if name in self._formal:
            prefix = f"{self.name} " if self.name else ""
            raise RegistrationError(f"{prefix}flag redefined: {name}")
        text = str(value) if default_text is None else default_text
        self._formal[name] = RegisteredFlag(name=name, value=value, usage=usage, default_text=text)
        logger.debug("Registered flag -%s (default %s)", name, quote(text))

    def lookup(self, name: str) -> Optional[RegisteredFlag]:
        return self._formal.get(name)

    def __iter__(self) -> Iterator[RegisteredFlag]:
        """Iterate registered flags in lexical order."""

        for name in sorted(self._formal):
            yield self._formal[name]

    def __len__(self) -> int:
        return len(self._formal)

    def is_set(self, name: str) -> bool:
        """Return ``True`` when *name* was supplied on the command line during :meth:`parse`."""

        return name in self._actual

    def parsed(self) -> bool:
        return self._parsed

    def args(self) -> List[str]:
        """Return the arguments left over after the flags."""

        return list(self._args)

    def parse(self, arguments: Optional[Sequence[str]]) -> None:
        """
        Consume flags from *arguments* and assign each through its registered value.

        Raises:
            FlagParseError: For unknown flags, bad syntax or a missing argument.
            ConversionError: If a registered value rejects its literal.
            DuplicateFlagError: If the same flag (by name or alias) appears twice.
        """
        self._parsed = True
        self._args = list(arguments or [])
        while self._parse_one():
            pass

    def _parse_one(self) -> bool:
        if not self._args:
            return False
        token = self._args[0]
        if len(token) < 2 or token[0] != "-":
            return False
        dashes = 1
        if token[1] == "-":
            dashes = 2
            if len(token) == 2:
                self._args.pop(0)
                return False
        name = token[dashes:]
        if not name or name[0] in "-=":
            raise FlagParseError(f"bad flag syntax: {token}")

        self._args.pop(0)
        has_value = False
        literal = ""
        if "=" in name:
            name, literal = name.split("=", 1)
            has_value = True

        flag = self._formal.get(name)
        if flag is None:
            raise FlagParseError(f"flag provided but not defined: -{name}")

        if flag.value.is_bool_flag():
            if not has_value:
                literal = "true"
        elif not has_value:
            if not self._args:
                raise FlagParseError(f"flag needs an argument: -{name}")
            literal = self._args.pop(0)

        if any(seen.value is flag.value for seen in self._actual.values()):
            raise DuplicateFlagError(literal, name)
        try:
            flag.value.set(literal)
        except ValueConstraintError as exc:
            raise ConversionError(literal, f"flag -{name}", str(exc)) from exc
        self._actual[name] = flag
        return True


__all__ = ["FlagSet", "RegisteredFlag"]
