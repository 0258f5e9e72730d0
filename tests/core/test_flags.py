from __future__ import annotations

import pytest

from src.flagbind.bool_flag import BoolFlag
from src.flagbind.env import mapping_lookup
from src.flagbind.errors import ConversionError, RegistrationError
from src.flagbind.flags import Flags
from src.flagbind.generic_flag import GenericFlag
from src.flagbind.value import Destination


def _flags(env: dict[str, str] | None = None) -> Flags:
    lookup = mapping_lookup(env)
    return Flags([
        GenericFlag(name="region", env_vars=["REGION"], destination=Destination("us-east-1"), lookup_env_func=lookup),
        GenericFlag(name="retries", kind="int", aliases=["r"], lookup_env_func=lookup),
        BoolFlag(name="debug", hidden=True, lookup_env_func=lookup),
    ])


def test_parse_applies_every_flag() -> None:
    flags = _flags({"REGION": "eu-west-1"})

    flag_set = flags.parse(["-r", "5", "--debug", "deploy"], set_name="cmd")

    assert flag_set.name == "cmd"
    assert flag_set.args() == ["deploy"]
    assert [flag.get_value() for flag in flags] == ["eu-west-1", "5", "true"]
    assert [flag.is_set() for flag in flags] == [True, True, True]


def test_defaults_when_nothing_supplied() -> None:
    flags = _flags()

    flags.parse([])

    assert [flag.get_value() for flag in flags] == ["us-east-1", "0", "false"]
    assert [flag.is_set() for flag in flags] == [False, False, False]


def test_get_by_name_or_alias() -> None:
    flags = _flags()

    retries = flags.get("r")
    assert retries is not None
    assert retries.name == "retries"
    assert flags.get("missing") is None
    assert "retries" in flags
    assert "missing" not in flags
    assert flags.names() == ["region", "retries", "r", "debug"]


def test_visible_and_sorted() -> None:
    flags = _flags()

    assert [flag.name for flag in flags.visible()] == ["region", "retries"]
    assert [flag.name for flag in flags.sorted()] == ["debug", "region", "retries"]
    assert len(flags) == 3


def test_add_rejects_name_clash() -> None:
    flags = _flags()

    with pytest.raises(RegistrationError, match="flag redefined: r"):
        flags.add(GenericFlag(name="r"))


def test_first_failure_stops_apply() -> None:
    flags = _flags({"REGION": "eu-west-1"})
    flags.add(GenericFlag(name="workers", kind="uint", env_vars=["WORKERS"], lookup_env_func=mapping_lookup({"WORKERS": "-2"})))

    with pytest.raises(ConversionError, match="env var WORKERS: must be 32-bit unsigned integer"):
        flags.parse([])
