"""String conversion adapters for every supported flag value kind."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Final, Optional, Union

from src.flagbind.errors import ValueConstraintError


class GenericType(str, Enum):
    """Primitive value kinds a generic flag can hold."""

    STRING = "string"
    INT = "int"
    INT64 = "int64"
    UINT = "uint"
    UINT64 = "uint64"
    FLOAT64 = "float64"


@dataclass(frozen=True)
class Adapter:
    """Pairs a text parser with its canonical formatter for one value kind."""

    name: str
    zero: Any
    constraint: str
    native: Union[type, tuple[type, ...]]
    parse_text: Callable[[str], Any]
    format_value: Callable[[Any], str]

    def parse(self, text: str) -> Any:
        """Convert *text* into a value, raising :class:`ValueConstraintError` on failure."""

        return self.parse_text(text)

    def format(self, value: Any) -> str:
        return self.format_value(value)

    def coerce(self, raw: Any) -> Any:
        """
        Normalise a literal or an already-typed value (e.g. from TOML) for this kind.

        Strings are parsed as if typed on the command line; native values are
        round-tripped through the parser so range limits still apply.
        """

        if isinstance(raw, str):
            return self.parse(raw)
        if isinstance(raw, bool) and self.native is not bool:
            raise ValueConstraintError(self.constraint)
        if not isinstance(raw, self.native):
            raise ValueConstraintError(self.constraint)
        return self.parse(repr(raw))

    def check(self, value: Any) -> None:
        """Ensure *value* is already a native value of this kind and within its range."""

        if isinstance(value, str) and self.native is not str:
            raise ValueConstraintError(self.constraint)
        self.coerce(value)


def _reject_malformed(text: str) -> None:
    if not text or not text.isascii() or any(ch.isspace() for ch in text):
        raise ValueError(text)


def _parse_integer(text: str) -> int:
    """
    Parse a decimal, ``0x``/``0o``/``0b`` prefixed or leading-zero octal literal.

    A single underscore may separate digits, or follow the base prefix or the
    leading octal zero (``1_000``, ``0x_1f``, ``0_7``).
    """

    _reject_malformed(text)
    sign = 1
    body = text
    if body[0] in "+-":
        sign = -1 if body[0] == "-" else 1
        body = body[1:]
    if not body or body[0] in "+-_":
        raise ValueError(text)
    if body.lower().startswith(("0x", "0o", "0b")):
        number = int(body, 0)
    elif len(body) > 1 and body[0] == "0":
        digits = body[1:]
        if digits.startswith("_"):
            digits = digits[1:]
        number = int(digits, 8)
    elif body[0].isdigit():
        number = int(body, 10)
    else:
        raise ValueError(text)
    return sign * number


def _integer_adapter(kind: GenericType, bits: int, *, signed: bool, constraint: str) -> Adapter:
    if signed:
        low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    else:
        low, high = 0, (1 << bits) - 1

    def parse(text: str) -> int:
        if not signed and text[:1] in ("+", "-"):
            raise ValueConstraintError(constraint)
        try:
            number = _parse_integer(text)
        except ValueError as exc:
            raise ValueConstraintError(constraint) from exc
        if not low <= number <= high:
            raise ValueConstraintError(constraint)
        return number

    return Adapter(
        name=kind.value,
        zero=0,
        constraint=constraint,
        native=int,
        parse_text=parse,
        format_value=lambda value: str(int(value)),
    )


_FLOAT_CONSTRAINT: Final[str] = "must be float64"


def _parse_float(text: str) -> float:
    try:
        _reject_malformed(text)
        if "_" in text:
            raise ValueError(text)
        if "0x" in text.lower():
            number = float.fromhex(text)
        else:
            number = float(text)
    except ValueError as exc:
        raise ValueConstraintError(_FLOAT_CONSTRAINT) from exc
    if math.isinf(number) and text.lower().lstrip("+-") not in ("inf", "infinity"):
        # overflowed the float64 range
        raise ValueConstraintError(_FLOAT_CONSTRAINT)
    return number


def _format_float(value: float) -> str:
    """Render *value* in shortest form, switching to exponent notation outside [1e-4, 1e21)."""

    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    magnitude = abs(value)
    if magnitude != 0 and (magnitude < 1e-4 or magnitude >= 1e21):
        return repr(float(value))
    return format(Decimal(repr(float(value))).normalize(), "f")


_TRUE_LITERALS: Final[frozenset[str]] = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_LITERALS: Final[frozenset[str]] = frozenset({"0", "f", "F", "FALSE", "false", "False"})
_BOOL_CONSTRAINT: Final[str] = 'must be one of: "0", "1", "f", "t", "false", "true"'


def _parse_bool(text: str) -> bool:
    if text in _TRUE_LITERALS:
        return True
    if text in _FALSE_LITERALS:
        return False
    raise ValueConstraintError(_BOOL_CONSTRAINT)


ADAPTERS: Final[dict[GenericType, Adapter]] = {
    GenericType.STRING: Adapter(
        name=GenericType.STRING.value,
        zero="",
        constraint="must be a string",
        native=str,
        parse_text=lambda text: text,
        format_value=str,
    ),
    GenericType.INT: _integer_adapter(GenericType.INT, 32, signed=True, constraint="must be 32-bit integer"),
    GenericType.INT64: _integer_adapter(GenericType.INT64, 64, signed=True, constraint="must be 64-bit integer"),
    GenericType.UINT: _integer_adapter(
        GenericType.UINT, 32, signed=False, constraint="must be 32-bit unsigned integer"
    ),
    GenericType.UINT64: _integer_adapter(
        GenericType.UINT64, 64, signed=False, constraint="must be 64-bit unsigned integer"
    ),
    GenericType.FLOAT64: Adapter(
        name=GenericType.FLOAT64.value,
        zero=0.0,
        constraint=_FLOAT_CONSTRAINT,
        native=(int, float),
        parse_text=_parse_float,
        format_value=_format_float,
    ),
}

BOOL_ADAPTER: Final[Adapter] = Adapter(
    name="bool",
    zero=False,
    constraint=_BOOL_CONSTRAINT,
    native=bool,
    parse_text=_parse_bool,
    format_value=lambda value: "true" if value else "false",
)


def adapter_for(kind: Union[GenericType, str]) -> Adapter:
    """Return the adapter registered for *kind*; unknown kinds raise ``ValueError``."""

    return ADAPTERS[GenericType(kind)]


def infer_kind(value: Optional[Any]) -> GenericType:
    """Pick the kind matching a destination's current Python value."""

    if value is None or isinstance(value, str):
        return GenericType.STRING
    if isinstance(value, bool):
        raise TypeError("boolean destinations belong to BoolFlag, not GenericFlag")
    if isinstance(value, int):
        return GenericType.INT
    if isinstance(value, float):
        return GenericType.FLOAT64
    raise TypeError(f"unsupported destination value type: {type(value).__name__}")


__all__ = [
    "ADAPTERS",
    "Adapter",
    "BOOL_ADAPTER",
    "GenericType",
    "adapter_for",
    "infer_kind",
]
