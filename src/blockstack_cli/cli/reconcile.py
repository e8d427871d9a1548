"""Merge positional and ``--keyword value`` tokens into an argument vector."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional, Sequence

from blockstack_cli.cli.schema import SCHEMA, CommandSchema, CommandSpec

ParseErrorKind = Literal[
    "no_command_given",
    "unrecognized_command",
    "duplicate_argument",
    "unknown_argument",
    "missing_value",
    "invalid_arguments",
]

KEYWORD_PREFIX = "--"


@dataclass(frozen=True)
class ReconcileResult:
    status: bool
    arguments: tuple[str, ...] = field(default_factory=tuple)
    error: Optional[str] = None
    error_kind: Optional[ParseErrorKind] = None


def _failure(kind: ParseErrorKind, message: str) -> ReconcileResult:
    return ReconcileResult(status=False, error=message, error_kind=kind)


def reconcile_arguments(command: CommandSpec, tokens: Sequence[str]) -> ReconcileResult:
    """Build the ordered argument vector for ``command`` from raw ``tokens``.

    Keyword-bound arguments keep their declared slot without consuming a
    positional value; every other slot takes the next positional value in
    order. Reassembly stops at the first slot for which no positional value
    is left, so omitted optional trailing arguments shorten the vector.
    Positional values left over after the last slot are dropped.
    """
    keyword_values: dict[str, str] = {}
    positional: list[str] = []

    index = 0
    while index < len(tokens):
        token = tokens[index]
        if not token.startswith(KEYWORD_PREFIX):
            positional.append(token)
            index += 1
            continue

        name = token[len(KEYWORD_PREFIX):]
        if name in keyword_values:
            return _failure("duplicate_argument", f"duplicate argument {token}")
        if command.argument(name) is None:
            return _failure("unknown_argument", f"no such argument {token}")
        if index + 1 >= len(tokens):
            return _failure("missing_value", f"no value for argument {token}")

        keyword_values[name] = tokens[index + 1]
        index += 2

    merged: list[str] = []
    remaining = iter(positional)
    for spec in command.argument_specs:
        if spec.name is not None and spec.name in keyword_values:
            merged.append(keyword_values[spec.name])
            continue
        value = next(remaining, None)
        if value is None:
            break
        merged.append(value)

    return ReconcileResult(status=True, arguments=tuple(merged))


def reconcile(
    command_name: str,
    tokens: Sequence[str],
    *,
    schema: CommandSchema = SCHEMA,
) -> ReconcileResult:
    command = schema.lookup(command_name)
    if command is None:
        return _failure("unrecognized_command", f"Unrecognized command '{command_name}'")
    return reconcile_arguments(command, tokens)


__all__ = [
    "KEYWORD_PREFIX",
    "ParseErrorKind",
    "ReconcileResult",
    "reconcile",
    "reconcile_arguments",
]
