"""Exception hierarchy shared by flag values, flag sets and flag collections."""

from __future__ import annotations

import json


def quote(text: str) -> str:
    """Return *text* as a double-quoted literal with escapes, e.g. ``"monkey"``."""

    return json.dumps(text, ensure_ascii=False)


class FlagError(ValueError):
    """Base class for every flag definition, registration and parsing failure."""


class ValueConstraintError(FlagError):
    """Raised by a conversion adapter; the message is the constraint that failed."""

    def __init__(self, constraint: str) -> None:
        super().__init__(constraint)
        self.constraint = constraint


class ConversionError(FlagError):
    """
    Raised when a literal cannot be assigned to a flag.

    Parameters:
        value (str): The offending literal exactly as supplied.
        origin (str): Where it came from, ``flag -<name>`` or ``env var <VAR>``.
        reason (str): Constraint text or other explanation.
    """

    def __init__(self, value: str, origin: str, reason: str) -> None:
        super().__init__(f"invalid value {quote(value)} for {origin}: {reason}")
        self.value = value
        self.origin = origin
        self.reason = reason


class DuplicateFlagError(ConversionError):
    """Raised when the same flag appears more than once on the command line."""

    REASON = "setting the flag multiple times"

    def __init__(self, value: str, name: str) -> None:
        super().__init__(value, f"flag -{name}", self.REASON)
        self.name = name


class RegistrationError(FlagError):
    """Raised when a flag cannot be registered with a flag set."""


class FlagParseError(FlagError):
    """Raised for malformed, unknown or incomplete command-line flags."""


__all__ = [
    "ConversionError",
    "DuplicateFlagError",
    "FlagError",
    "FlagParseError",
    "RegistrationError",
    "ValueConstraintError",
    "quote",
]
