"""Configuration loader that parses and validates flag declarations from TOML."""

from __future__ import annotations

import tomllib
from dataclasses import fields
from typing import Any, Dict, List, Optional

from .datatypes import DeclaredKind, FlagDeclaration, FlagsConfig
from .flagbind.adapters import BOOL_ADAPTER, adapter_for
from .flagbind.bool_flag import BoolFlag
from .flagbind.env import LookupEnvFunc, lookup_env
from .flagbind.errors import FlagError
from .flagbind.flags import Flags
from .flagbind.generic_flag import GenericFlag
from .flagbind.value import Destination


class ConfigError(ValueError):
    """Raised when the declarations file is malformed or fails validation."""


def _coerce_bool(value: Any, dotted_key: str) -> bool:
    """Return a bool, coercing simple 0/1 representations when necessary."""

    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"0", "1"}:
            return normalized == "1"
        if normalized in {"true", "false"}:
            return normalized == "true"
    raise ConfigError(f"{dotted_key} must be a boolean (use true/false).")


def _coerce_names(value: Any, dotted_key: str) -> List[str]:
    """Accept a single string or a list of non-empty strings."""

    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(item, str) and item.strip() for item in value):
        raise ConfigError(f"{dotted_key} must be a string or a list of non-empty strings")
    return [item.strip() for item in value]


def _sanitize_flag(raw: Any, label: str) -> FlagDeclaration:
    """
    Coerce one raw ``[[flag]]`` table into a :class:`FlagDeclaration`.

    Parameters:
        raw (Any): Raw TOML table.
        label (str): Position label used when reporting validation errors.

    Returns:
        FlagDeclaration: Declaration with normalised names, kind and default.

    Raises:
        ConfigError: If the entry is not a table or contains invalid keys or values.
    """
    if not isinstance(raw, dict):
        raise ConfigError(f"{label} must be a table")
    cleaned: Dict[str, Any] = dict(raw)
    if "env_var" in cleaned:
        if "env_vars" in cleaned:
            raise ConfigError(f"{label} sets both env_var and env_vars")
        cleaned["env_vars"] = cleaned.pop("env_var")

    known = {item.name for item in fields(FlagDeclaration)}
    unknown = sorted(set(cleaned) - known)
    if unknown:
        raise ConfigError(f"Invalid keys in {label}: {', '.join(unknown)}")

    name = cleaned.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ConfigError(f"{label}.name must be a non-empty string")
    name = name.strip()
    if name.startswith("-") or "=" in name:
        raise ConfigError(f"{label}.name must not start with '-' or contain '='")
    label = f"flag '{name}'"

    raw_type = str(cleaned.get("type", DeclaredKind.STRING.value)).strip().lower()
    try:
        kind = DeclaredKind(raw_type)
    except ValueError as exc:
        choices = ", ".join(member.value for member in DeclaredKind)
        raise ConfigError(f"{label}.type must be one of: {choices}") from exc

    declaration = FlagDeclaration(
        name=name,
        type=kind,
        env_vars=_coerce_names(cleaned.get("env_vars", []), f"{label}.env_vars"),
        usage=str(cleaned.get("usage", "")),
        aliases=_coerce_names(cleaned.get("aliases", []), f"{label}.aliases"),
        hidden=_coerce_bool(cleaned.get("hidden", False), f"{label}.hidden"),
        default_text=str(cleaned.get("default_text", "")),
    )
    if cleaned.get("default") is not None:
        adapter = BOOL_ADAPTER if kind is DeclaredKind.BOOL else adapter_for(kind.value)
        try:
            declaration.default = adapter.coerce(cleaned["default"])
        except FlagError as exc:
            raise ConfigError(f"{label}.default {exc}") from exc
    return declaration


def _validate_unique_names(declarations: List[FlagDeclaration]) -> None:
    """
    Ensure no flag name or alias is declared twice.

    Raises:
        ConfigError: On the first repeated name.
    """
    seen: Dict[str, str] = {}
    for declaration in declarations:
        for name in (declaration.name, *declaration.aliases):
            owner = seen.get(name)
            if owner is not None:
                raise ConfigError(f"flag name '{name}' is declared by both '{owner}' and '{declaration.name}'")
            seen[name] = declaration.name


def parse_config(raw: Dict[str, Any]) -> FlagsConfig:
    """Validate an already-decoded TOML document."""

    program = raw.get("program", "flagbind")
    if not isinstance(program, str) or not program.strip():
        raise ConfigError("program must be a non-empty string")
    entries = raw.get("flag", [])
    if not isinstance(entries, list):
        raise ConfigError("[[flag]] must be an array of tables")
    unexpected = sorted(set(raw) - {"program", "flag"})
    if unexpected:
        raise ConfigError(f"Unknown top-level keys: {', '.join(unexpected)}")

    declarations = [_sanitize_flag(entry, f"[[flag]] #{index}") for index, entry in enumerate(entries, start=1)]
    _validate_unique_names(declarations)
    return FlagsConfig(program=program.strip(), flags=declarations)


def load_config(path: str) -> FlagsConfig:
    """
    Load and validate flag declarations from a TOML file.

    Reads the file at `path` as UTF-8 TOML (BOM is accepted) and returns the
    validated :class:`FlagsConfig`.

    Raises:
        ConfigError: If the file is not UTF-8, TOML parsing fails, or any declaration is invalid.
    """

    with open(path, "rb") as handle:
        raw_bytes = handle.read()
    if raw_bytes.startswith(b"\xef\xbb\xbf"):
        raw_bytes = raw_bytes[3:]
    try:
        raw = tomllib.loads(raw_bytes.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise ConfigError("Configuration file must be UTF-8 encoded") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Failed to parse TOML: {exc}") from exc
    return parse_config(raw)


def build_flags(config: FlagsConfig, *, lookup_env_func: Optional[LookupEnvFunc] = None) -> Flags:
    """Instantiate a :class:`Flags` collection from validated declarations."""

    lookup = lookup_env_func or lookup_env
    flags = Flags()
    for declaration in config.flags:
        destination = None if declaration.default is None else Destination(declaration.default)
        common: Dict[str, Any] = {
            "name": declaration.name,
            "env_vars": list(declaration.env_vars),
            "destination": destination,
            "usage": declaration.usage,
            "aliases": list(declaration.aliases),
            "default_text": declaration.default_text,
            "hidden": declaration.hidden,
            "lookup_env_func": lookup,
        }
        if declaration.type is DeclaredKind.BOOL:
            flags.add(BoolFlag(**common))
        else:
            flags.add(GenericFlag(kind=declaration.type.value, **common))
    return flags


__all__ = ["ConfigError", "build_flags", "load_config", "parse_config"]
