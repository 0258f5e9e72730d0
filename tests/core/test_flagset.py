from __future__ import annotations

import re

import pytest

from src.flagbind.adapters import BOOL_ADAPTER, GenericType, adapter_for
from src.flagbind.errors import ConversionError, DuplicateFlagError, FlagParseError, RegistrationError
from src.flagbind.flagset import FlagSet
from src.flagbind.value import BoolValue, Destination, GenericValue


def _string_value(initial: str = "") -> GenericValue[str]:
    return GenericValue(Destination(initial), adapter_for(GenericType.STRING))


def _bool_value(initial: bool = False) -> BoolValue:
    return BoolValue(Destination(initial), BOOL_ADAPTER)


@pytest.mark.parametrize(
    "args",
    [
        ["-name", "value"],
        ["--name", "value"],
        ["-name=value"],
        ["--name=value"],
    ],
)
def test_accepted_flag_forms(args: list[str]) -> None:
    value = _string_value()
    flag_set = FlagSet("cmd")
    flag_set.var(value, "name")

    flag_set.parse(args)

    assert value.get() == "value"
    assert flag_set.is_set("name")
    assert flag_set.args() == []


def test_value_may_contain_equals_sign() -> None:
    value = _string_value()
    flag_set = FlagSet("cmd")
    flag_set.var(value, "opt")

    flag_set.parse(["--opt=key=value"])

    assert value.get() == "key=value"


def test_parsing_stops_at_first_positional_argument() -> None:
    value = _string_value()
    flag_set = FlagSet("cmd")
    flag_set.var(value, "name")

    flag_set.parse(["positional", "--name", "ignored"])

    assert value.get() == ""
    assert flag_set.args() == ["positional", "--name", "ignored"]


def test_double_dash_terminates_flags() -> None:
    value = _string_value()
    flag_set = FlagSet("cmd")
    flag_set.var(value, "name")

    flag_set.parse(["--name", "x", "--", "--name", "y"])

    assert value.get() == "x"
    assert flag_set.args() == ["--name", "y"]


def test_single_dash_is_positional() -> None:
    flag_set = FlagSet("cmd")
    flag_set.parse(["-", "rest"])

    assert flag_set.args() == ["-", "rest"]
    assert flag_set.parsed()


def test_bool_value_does_not_consume_next_token() -> None:
    value = _bool_value()
    flag_set = FlagSet("cmd")
    flag_set.var(value, "verbose")

    flag_set.parse(["--verbose", "file.txt"])

    assert value.get() is True
    assert flag_set.args() == ["file.txt"]


def test_bool_value_accepts_explicit_literal() -> None:
    value = _bool_value(True)
    flag_set = FlagSet("cmd")
    flag_set.var(value, "verbose")

    flag_set.parse(["--verbose=false"])

    assert value.get() is False


def test_unknown_flag() -> None:
    flag_set = FlagSet("cmd")

    with pytest.raises(FlagParseError, match="flag provided but not defined: -missing"):
        flag_set.parse(["--missing", "x"])


def test_missing_argument() -> None:
    flag_set = FlagSet("cmd")
    flag_set.var(_string_value(), "name")

    with pytest.raises(FlagParseError, match="flag needs an argument: -name"):
        flag_set.parse(["--name"])


@pytest.mark.parametrize("token", ["---name", "-=value", "--=value"])
def test_bad_flag_syntax(token: str) -> None:
    flag_set = FlagSet("cmd")

    with pytest.raises(FlagParseError, match=re.escape(f"bad flag syntax: {token}")):
        flag_set.parse([token])


def test_conversion_error_names_the_flag() -> None:
    flag_set = FlagSet("cmd")
    flag_set.var(GenericValue(Destination(0), adapter_for(GenericType.INT64)), "count")

    with pytest.raises(ConversionError) as excinfo:
        flag_set.parse(["--count", "many"])

    assert str(excinfo.value) == 'invalid value "many" for flag -count: must be 64-bit integer'
    assert excinfo.value.value == "many"
    assert excinfo.value.reason == "must be 64-bit integer"


def test_invalid_boolean_literal() -> None:
    flag_set = FlagSet("cmd")
    flag_set.var(_bool_value(), "verbose")

    with pytest.raises(ConversionError, match=re.escape('invalid value "maybe" for flag -verbose')):
        flag_set.parse(["--verbose=maybe"])


def test_repeated_flag_is_duplicate() -> None:
    flag_set = FlagSet("cmd")
    flag_set.var(_string_value(), "foo")

    with pytest.raises(DuplicateFlagError) as excinfo:
        flag_set.parse(["--foo", "a", "--foo", "b"])

    assert str(excinfo.value) == 'invalid value "b" for flag -foo: setting the flag multiple times'
    assert excinfo.value.name == "foo"


def test_redefinition_is_rejected() -> None:
    flag_set = FlagSet("cmd")
    flag_set.var(_string_value(), "foo")

    with pytest.raises(RegistrationError, match="cmd flag redefined: foo"):
        flag_set.var(_string_value(), "foo")


@pytest.mark.parametrize("name", ["", "-foo", "a=b"])
def test_invalid_names_are_rejected(name: str) -> None:
    with pytest.raises(RegistrationError):
        FlagSet().var(_string_value(), name)


def test_registered_default_text_and_iteration_order() -> None:
    flag_set = FlagSet("cmd")
    flag_set.var(_string_value("zeta-default"), "zeta", "last")
    flag_set.var(_string_value(), "alpha", "first", default_text="custom")

    registered = list(flag_set)

    assert [entry.name for entry in registered] == ["alpha", "zeta"]
    assert registered[0].default_text == "custom"
    assert registered[1].default_text == "zeta-default"
    assert registered[1].usage == "last"
    assert len(flag_set) == 2
    assert flag_set.lookup("missing") is None


def test_parse_none_is_empty() -> None:
    flag_set = FlagSet()
    flag_set.var(_string_value("kept"), "name")

    flag_set.parse(None)

    assert flag_set.args() == []
    assert not flag_set.is_set("name")
