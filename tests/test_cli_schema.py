from __future__ import annotations

import re

import pytest
from pydantic import ValidationError

from blockstack_cli.cli.schema import SCHEMA, ArgumentSpec, CommandSchema, CommandSpec
from blockstack_cli.errors import SchemaDefinitionError


def _spec(name: str, *args: ArgumentSpec, min_args: int | None = None) -> CommandSpec:
    return CommandSpec(
        name=name,
        argument_specs=args,
        min_args=len(args) if min_args is None else min_args,
        max_args=len(args),
        help_text="",
        group="Test",
    )


def test_every_command_arity_matches_declared_arguments() -> None:
    for command in SCHEMA.all_commands():
        assert command.min_args <= command.max_args == len(command.argument_specs)


def test_every_argument_is_named_and_typed_with_compiling_pattern() -> None:
    for command in SCHEMA.all_commands():
        for spec in command.argument_specs:
            assert spec.name
            assert spec.semantic_type
            if spec.pattern is not None:
                re.compile(spec.pattern)


def test_schema_holds_full_command_set() -> None:
    assert len(SCHEMA) == 37
    for name in ("balance", "whois", "register_subdomain", "help", "zonefile_push"):
        assert name in SCHEMA
    assert SCHEMA.lookup("frobnicate") is None


def test_balance_declares_single_address_argument() -> None:
    balance = SCHEMA.lookup("balance")
    assert balance is not None
    assert (balance.min_args, balance.max_args) == (1, 1)
    assert [spec.name for spec in balance.argument_specs] == ["address"]
    assert balance.argument_specs[0].accepts("1FhZqKjxyr5vr5CrGJiTJQdtFvP3sfKMLd")
    assert not balance.argument_specs[0].accepts("bad addr")


def test_optional_trailing_arguments() -> None:
    register_subdomain = SCHEMA.lookup("register_subdomain")
    assert register_subdomain is not None
    assert (register_subdomain.min_args, register_subdomain.max_args) == (4, 5)
    assert not register_subdomain.is_optional(3)
    assert register_subdomain.is_optional(4)


def test_argument_without_pattern_accepts_any_non_empty_value() -> None:
    spec = ArgumentSpec(name="gaia_hub", semantic_type="url")
    assert spec.accepts("https://hub.blockstack.org")
    assert not spec.accepts("")


def test_pattern_uses_full_match() -> None:
    spec = ArgumentSpec(name="amount", semantic_type="integer", pattern=r"[0-9]+")
    assert spec.accepts("5500")
    assert not spec.accepts("5500sat")


def test_grouped_commands_sorted_by_group() -> None:
    groups = list(SCHEMA.grouped_commands())
    assert groups == sorted(groups)
    assert "help" in [command.name for command in SCHEMA.grouped_commands()["CLI"]]


def test_command_spec_rejects_inconsistent_arity() -> None:
    with pytest.raises(ValidationError):
        CommandSpec(
            name="broken",
            argument_specs=(ArgumentSpec(name="a", semantic_type="string"),),
            min_args=1,
            max_args=2,
            help_text="",
            group="Test",
        )
    with pytest.raises(ValidationError):
        _spec("broken", ArgumentSpec(name="a", semantic_type="string"), min_args=2)


def test_command_spec_rejects_duplicate_argument_names() -> None:
    with pytest.raises(ValidationError):
        _spec(
            "broken",
            ArgumentSpec(name="a", semantic_type="string"),
            ArgumentSpec(name="a", semantic_type="string"),
        )


def test_argument_spec_rejects_bad_pattern_and_blank_fields() -> None:
    with pytest.raises(ValidationError):
        ArgumentSpec(name="a", semantic_type="string", pattern="([")
    with pytest.raises(ValidationError):
        ArgumentSpec(name="a", semantic_type="")
    with pytest.raises(ValidationError):
        ArgumentSpec(name="  ", semantic_type="string")


def test_schema_rejects_duplicate_command() -> None:
    command = _spec("dup", ArgumentSpec(name="a", semantic_type="string"))
    with pytest.raises(SchemaDefinitionError):
        CommandSchema([command, command])


def test_schema_rejects_unnamed_argument() -> None:
    command = _spec("anon", ArgumentSpec(semantic_type="string"))
    with pytest.raises(SchemaDefinitionError):
        CommandSchema([command])


def test_specs_are_frozen() -> None:
    balance = SCHEMA.lookup("balance")
    assert balance is not None
    with pytest.raises(ValidationError):
        balance.min_args = 0
