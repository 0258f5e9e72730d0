"""Runtime helpers shared by the ``flagbind`` command-line entry point."""

from __future__ import annotations

from typing import Dict, List, Literal, Mapping, Optional, Sequence, TypedDict

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from src.flagbind.errors import FlagError
from src.flagbind.flags import Flags
from src.flagbind.flagset import FlagSet

ValueSource = Literal["flag", "env", "default"]


class CLIAppError(RuntimeError):
    """Raised when the CLI cannot complete its work."""

    def __init__(self, message: str, *, code: int = 1, rich_message: Optional[str] = None) -> None:
        super().__init__(message)
        self.code = code
        self.rich_message = rich_message or escape(message)


class FlagResolution(TypedDict):
    """Resolved state of one declared flag after parsing."""

    name: str
    kind: str
    value: str
    source: ValueSource
    env_var: Optional[str]
    default: str
    is_set: bool
    env_vars: List[str]
    usage: str


class ResolveJSON(TypedDict):
    program: str
    flags: List[FlagResolution]
    args: List[str]


def parse_env_overrides(pairs: Sequence[str]) -> Dict[str, str]:
    """
    Turn ``KEY=VALUE`` strings into a mapping.

    Raises:
        CLIAppError: If an entry lacks ``=`` or has an empty key.
    """
    overrides: Dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise CLIAppError(f"--env expects KEY=VALUE, got {pair!r}", code=2)
        overrides[key.strip()] = value
    return overrides


def resolve_flags(flags: Flags, arguments: Sequence[str], *, program: str) -> tuple[FlagSet, List[FlagResolution]]:
    """
    Apply and parse *flags* against *arguments* and describe where each value came from.

    Raises:
        CLIAppError: With exit code 2 when any flag error surfaces.
    """
    try:
        flag_set = flags.parse(arguments, set_name=program)
    except FlagError as exc:
        raise CLIAppError(str(exc), code=2) from exc

    resolutions: List[FlagResolution] = []
    for flag in flags:
        env_var = flag.get_env_source()
        source: ValueSource
        if any(flag_set.is_set(name) for name in flag.names()):
            source = "flag"
        elif env_var is not None:
            source = "env"
        else:
            source = "default"
        resolutions.append({
            "name": flag.name,
            "kind": flag.kind_name(),
            "value": flag.get_value(),
            "source": source,
            "env_var": env_var if source == "env" else None,
            "default": flag.get_default_text(),
            "is_set": flag.is_set(),
            "env_vars": flag.get_env_vars(),
            "usage": flag.get_usage(),
        })
    return flag_set, resolutions


def build_resolve_json(program: str, resolutions: List[FlagResolution], args: Sequence[str]) -> ResolveJSON:
    return {"program": program, "flags": list(resolutions), "args": list(args)}


_SOURCE_STYLES: Mapping[ValueSource, str] = {
    "flag": "bold green",
    "env": "cyan",
    "default": "dim",
}


def render_resolutions(console: Console, program: str, resolutions: Sequence[FlagResolution]) -> None:
    """Print a table of resolved flags."""

    table = Table(title=f"{escape(program)} flags", title_justify="left")
    table.add_column("Flag", no_wrap=True)
    table.add_column("Kind")
    table.add_column("Value", overflow="fold")
    table.add_column("Source")
    table.add_column("Default", overflow="fold")
    table.add_column("Usage", overflow="fold")
    for entry in resolutions:
        source_label = entry["source"]
        if entry["env_var"]:
            source_label = f"env {entry['env_var']}"
        style = _SOURCE_STYLES[entry["source"]]
        table.add_row(
            f"--{escape(entry['name'])}",
            entry["kind"],
            escape(entry["value"]),
            f"[{style}]{escape(source_label)}[/{style}]",
            escape(entry["default"]),
            escape(entry["usage"]),
        )
    console.print(table)


__all__ = [
    "CLIAppError",
    "FlagResolution",
    "ResolveJSON",
    "build_resolve_json",
    "parse_env_overrides",
    "render_resolutions",
    "resolve_flags",
]
