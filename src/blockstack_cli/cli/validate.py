"""Arity and pattern validation of reconciled command arguments."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from blockstack_cli.cli.reconcile import ParseErrorKind, reconcile_arguments
from blockstack_cli.cli.schema import SCHEMA, CommandSchema, CommandSpec

logger = logging.getLogger(__name__)

INVALID_ARGUMENTS_MESSAGE = "Invalid command arguments"


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    reason: Optional[str] = None


@dataclass(frozen=True)
class ParseOutcome:
    success: bool
    command: str = ""
    args: tuple[str, ...] = field(default_factory=tuple)
    error: Optional[str] = None
    error_kind: Optional[ParseErrorKind] = None
    show_usage: bool = False


def validate(
    command: CommandSpec,
    arguments: Sequence[str],
    *,
    schema: CommandSchema = SCHEMA,
) -> ValidationResult:
    count = len(arguments)
    if count < command.min_args or count > command.max_args:
        return ValidationResult(
            valid=False,
            reason=(
                f"{command.name} takes {command.min_args} to {command.max_args} "
                f"arguments, got {count}"
            ),
        )

    for spec, value in zip(command.argument_specs, arguments):
        if not spec.accepts(value):
            label = spec.name or spec.semantic_type
            return ValidationResult(
                valid=False,
                reason=f"{command.name}: {label} is not a valid {spec.semantic_type}",
            )

    if schema.lookup(command.name) is None:
        return ValidationResult(valid=False, reason=f"{command.name} is not a known command")

    return ValidationResult(valid=True)


def _parse_failure(
    kind: ParseErrorKind,
    message: str,
    *,
    command: str = "",
) -> ParseOutcome:
    return ParseOutcome(
        success=False,
        command=command,
        error=message,
        error_kind=kind,
        show_usage=True,
    )


def check_args(tokens: Sequence[str], *, schema: CommandSchema = SCHEMA) -> ParseOutcome:
    """Turn the tokens left after global options into a validated invocation."""
    if not tokens:
        return _parse_failure("no_command_given", "No command given")

    command_name = tokens[0]
    command = schema.lookup(command_name)
    if command is None:
        return _parse_failure(
            "unrecognized_command",
            f"Unrecognized command '{command_name}'",
            command=command_name,
        )

    reconciled = reconcile_arguments(command, tokens[1:])
    if not reconciled.status:
        return _parse_failure(
            reconciled.error_kind or "invalid_arguments",
            reconciled.error or INVALID_ARGUMENTS_MESSAGE,
            command=command_name,
        )

    result = validate(command, reconciled.arguments, schema=schema)
    if not result.valid:
        logger.debug("rejected %s arguments: %s", command_name, result.reason)
        return _parse_failure(
            "invalid_arguments",
            INVALID_ARGUMENTS_MESSAGE,
            command=command_name,
        )

    return ParseOutcome(success=True, command=command_name, args=reconciled.arguments)


__all__ = [
    "INVALID_ARGUMENTS_MESSAGE",
    "ParseOutcome",
    "ValidationResult",
    "check_args",
    "validate",
]
