"""Type-parametrised command-line flag with environment fallback and default binding."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar, Union

from src.flagbind.adapters import ADAPTERS, Adapter, GenericType, infer_kind
from src.flagbind.env import LookupEnvFunc, lookup_env
from src.flagbind.errors import ConversionError, RegistrationError, ValueConstraintError, quote
from src.flagbind.flagset import FlagSet
from src.flagbind.value import Destination, GenericValue

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class GenericFlag(Generic[T]):
    """
    A flag holding one primitive value, resolved from the command line, the
    environment or its destination default, in that order of precedence.

    ``kind`` selects the conversion adapter. When omitted it is inferred from
    the destination's current value (``str``, ``int`` or ``float``) and falls
    back to :attr:`GenericType.STRING` without a destination.

    ``lookup_env_func`` is consulted for each name in ``env_vars``; the first
    one yielding a non-empty value wins.
    """

    name: str
    kind: Optional[Union[GenericType, str]] = None
    env_vars: List[str] = field(default_factory=list)
    destination: Optional[Destination[T]] = None
    usage: str = ""
    aliases: List[str] = field(default_factory=list)
    default_text: str = ""
    hidden: bool = False
    lookup_env_func: LookupEnvFunc = field(default=lookup_env, repr=False, compare=False)

    _value: Optional[GenericValue[T]] = field(default=None, init=False, repr=False, compare=False)
    _initial_text: Optional[str] = field(default=None, init=False, repr=False, compare=False)
    _env_source: Optional[str] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.name:
            raise RegistrationError("flag name must not be empty")
        if isinstance(self.env_vars, str):
            self.env_vars = [self.env_vars]
        self.kind = self._resolve_kind()

    def _resolve_kind(self) -> Optional[GenericType]:
        if self.kind is not None:
            return GenericType(self.kind)
        current = self.destination.value if self.destination is not None else None
        return infer_kind(current)

    def adapter(self) -> Adapter:
        return ADAPTERS[GenericType(self.kind)]

    def _new_value(self, destination: Destination[T], adapter: Adapter) -> GenericValue[T]:
        return GenericValue(destination, adapter)

    def apply(self, flag_set: FlagSet) -> None:
        """
        Register the flag with *flag_set* and resolve any environment override.

        The destination is allocated with the kind's zero value when absent, and
        its text is captured as the initial value before anything can change it.
        Command-line values assigned later by :meth:`FlagSet.parse` overwrite an
        environment value.

        Raises:
            RegistrationError: If this flag was already applied or a name is taken.
            ConversionError: If the destination already holds a value outside this kind, or
                the first defined environment variable holds an invalid literal.
        """
        if self._value is not None:
            raise RegistrationError(f"flag -{self.name} has already been applied")

        adapter = self.adapter()
        if self.destination is None:
            self.destination = Destination(adapter.zero)
        else:
            current = self.destination.value
            try:
                adapter.check(current)
            except ValueConstraintError as exc:
                raise ConversionError(str(current), f"default of flag -{self.name}", str(exc)) from exc
        value = self._new_value(self.destination, adapter)
        self._value = value
        self._initial_text = str(value)

        default_text = self.get_default_text()
        for name in self.names():
            flag_set.var(value, name, self.usage, default_text=default_text)

        for env_var in self.env_vars:
            text = self.lookup_env_func(env_var)
            if not text:
                continue
            try:
                value.set(text)
            except ValueConstraintError as exc:
                raise ConversionError(text, f"env var {env_var}", str(exc)) from exc
            self._env_source = env_var
            logger.debug("Flag -%s resolved from env var %s = %s", self.name, env_var, quote(text))
            break

    def value(self) -> Optional[GenericValue[T]]:
        """Return the registered value wrapper, or ``None`` before :meth:`apply`."""

        return self._value

    def get_value(self) -> str:
        if self._value is not None:
            return str(self._value)
        adapter = self.adapter()
        current = self.destination.value if self.destination is not None else adapter.zero
        return adapter.format(current)

    def is_set(self) -> bool:
        """Return ``True`` once a command-line or environment value has been assigned."""

        return self._value is not None and self._value.is_set()

    def get_initial_text_value(self) -> str:
        if self._initial_text is not None:
            return self._initial_text
        return self.get_value()

    def get_default_text(self) -> str:
        """Text to show as the default in help output; ``default_text`` wins when given."""

        return self.default_text or self.get_initial_text_value()

    def is_bool_flag(self) -> bool:
        return False

    def takes_value(self) -> bool:
        return True

    def names(self) -> List[str]:
        return [self.name, *self.aliases]

    def get_env_vars(self) -> List[str]:
        return list(self.env_vars)

    def get_usage(self) -> str:
        return self.usage

    def get_env_source(self) -> Optional[str]:
        """Name of the environment variable that supplied the value, if any."""

        return self._env_source

    def kind_name(self) -> str:
        return self.adapter().name


__all__ = ["GenericFlag"]
