"""CLI entry point for resolving declared flags against arguments and the environment."""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Callable, Dict, Final, NoReturn, Optional, Tuple, cast

import click
from rich.console import Console

from src.config_loader import ConfigError, build_flags, load_config
from src.datatypes import FlagsConfig
from src.flagbind.cli_runtime import (
    CLIAppError,
    build_resolve_json,
    parse_env_overrides,
    render_resolutions,
    resolve_flags,
)
from src.flagbind.env import chain_lookups, lookup_env, mapping_lookup

logger = logging.getLogger("flagbind")

CONFIG_ENV_VAR: Final[str] = "FLAGBIND_CONFIG"
DEFAULT_CONFIG_NAME: Final[str] = "flags.toml"

_DEFAULT_CONFIG_HELP: Final[str] = (
    f"Path to the flag declarations file. Defaults to ./{DEFAULT_CONFIG_NAME} "
    f"(see {CONFIG_ENV_VAR})."
)

_stderr_console = Console(stderr=True)


def _exit_with_error(exc: CLIAppError) -> NoReturn:
    _stderr_console.print(f"[red]{exc.rich_message}[/red]", soft_wrap=True, highlight=False)
    sys.exit(exc.code)


def _load_declarations(config_path: str) -> FlagsConfig:
    """Load *config_path*, translating loader failures into :class:`CLIAppError`."""

    try:
        return load_config(config_path)
    except FileNotFoundError as exc:
        raise CLIAppError(f"Config file not found: {config_path}") from exc
    except ConfigError as exc:
        raise CLIAppError(f"Config parsing failed: {exc}") from exc


@click.group()
@click.option("--config", "config_path", default=None, envvar=CONFIG_ENV_VAR, help=_DEFAULT_CONFIG_HELP)
@click.option("--verbose", is_flag=True, help="Log registration and environment resolution details.")
@click.pass_context
def main(ctx: click.Context, config_path: Optional[str], verbose: bool) -> None:
    """Resolve typed flags from the command line, the environment and declared defaults."""

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="[%(levelname)s] %(message)s")
    params = cast(Dict[str, Any], ctx.ensure_object(dict))
    params["config_path"] = config_path or DEFAULT_CONFIG_NAME


@main.command(
    "resolve",
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False},
)
@click.option("--json", "json_mode", is_flag=True, help="Emit machine-readable results.")
@click.option(
    "--env",
    "env_pairs",
    multiple=True,
    metavar="KEY=VALUE",
    help="Environment override consulted before the process environment. Repeatable.",
)
@click.argument("arguments", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def resolve(ctx: click.Context, json_mode: bool, env_pairs: Tuple[str, ...], arguments: Tuple[str, ...]) -> None:
    """Parse ARGUMENTS against the declared flags and report each resolved value.

    Separate the arguments with -- when a declared flag shares a name with an option of this command.
    """

    params = cast(Dict[str, Any], ctx.ensure_object(dict))
    config_path = cast(str, params["config_path"])
    try:
        config = _load_declarations(config_path)
        overrides = parse_env_overrides(env_pairs)
        lookup = chain_lookups(mapping_lookup(overrides), lookup_env) if overrides else lookup_env
        flags = build_flags(config, lookup_env_func=lookup)
        flag_set, resolutions = resolve_flags(flags, list(arguments), program=config.program)
    except CLIAppError as exc:
        _exit_with_error(exc)

    logger.debug("Resolved %d flag(s) from %s", len(resolutions), config_path)
    if json_mode:
        payload = build_resolve_json(config.program, resolutions, flag_set.args())
        click.echo(json.dumps(payload, indent=2))
        return
    render_resolutions(Console(), config.program, resolutions)
    remaining = flag_set.args()
    if remaining:
        click.echo(f"Remaining arguments: {' '.join(remaining)}")


@main.command("check")
@click.pass_context
def check(ctx: click.Context) -> None:
    """Validate the declarations file and list the flags it defines."""

    params = cast(Dict[str, Any], ctx.ensure_object(dict))
    config_path = cast(str, params["config_path"])
    try:
        config = _load_declarations(config_path)
    except CLIAppError as exc:
        _exit_with_error(exc)

    click.echo(f"{config_path}: {len(config.flags)} flag(s) declared for {config.program}")
    for flag in build_flags(config):
        names = ", ".join(f"--{name}" for name in flag.names())
        line = f"  {names} ({flag.kind_name()})"
        env_vars = flag.get_env_vars()
        if env_vars:
            line += f" env: {', '.join(env_vars)}"
        if flag.hidden:
            line += " [hidden]"
        usage = flag.get_usage()
        if usage:
            line += f" - {usage}"
        click.echo(line)


if __name__ == "__main__":
    _entry_point = cast(Callable[[], None], main)
    _entry_point()
