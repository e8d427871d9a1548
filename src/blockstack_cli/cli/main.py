"""Command-line interface for blockstack-cli."""

from __future__ import annotations

import json
import logging
import re
import sys
from typing import Any, Sequence

from blockstack_cli.cli.commands import COMMANDS, CommandContext
from blockstack_cli.cli.config import CLIConfig, ConfigError, load_cli_config
from blockstack_cli.cli.options import ExecutionOptions, OptionsError, get_cli_opts
from blockstack_cli.cli.schema import SCHEMA
from blockstack_cli.cli.usage import all_commands_list, command_usage, usage_banner
from blockstack_cli.cli.validate import ParseOutcome, check_args
from blockstack_cli.client import NetworkClient
from blockstack_cli.collaborators import Backends
from blockstack_cli.errors import (
    BlockstackCLIError,
    CollaboratorUnavailableError,
    NetworkRequestError,
    NetworkUnavailableError,
    SafetyCheckError,
)

EXIT_SUCCESS = 0
EXIT_VALIDATION_ERROR = 1
EXIT_NETWORK_ERROR = 2
EXIT_MISSING_BACKEND = 5

PACKAGE_LOGGER = "blockstack_cli"
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

_SECRET_TYPES = frozenset({"private_key", "backup_phrase", "12_words", "12_word"})
_HEX_KEY_RE = re.compile(r"\b[0-9a-fA-F]{64,66}\b")


def _attach_log_handler(config: CLIConfig, stderr) -> logging.Handler:
    handler = logging.StreamHandler(stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.addHandler(handler)
    package_logger.setLevel(config.logging_level)
    return handler


def _secret_arguments(outcome: ParseOutcome) -> list[str]:
    command = SCHEMA.lookup(outcome.command)
    if command is None:
        return []
    return [
        value
        for spec, value in zip(command.argument_specs, outcome.args)
        if spec.semantic_type in _SECRET_TYPES and value
    ]


def _sanitize_error_text(value: str, secrets: Sequence[str] = ()) -> str:
    redacted = value
    for secret in sorted(secrets, key=len, reverse=True):
        redacted = redacted.replace(secret, "[REDACTED]")
    return _HEX_KEY_RE.sub("[REDACTED]", redacted)


def _print_error(
    stderr,
    prefix: str,
    message: str,
    *,
    code: int,
    secrets: Sequence[str] = (),
) -> int:
    print(f"{prefix}: {_sanitize_error_text(message, secrets)}", file=stderr)
    return code


def _print_parse_failure(outcome: ParseOutcome, *, prog: str, stdout, stderr) -> int:
    print(outcome.error, file=stderr)
    if outcome.show_usage:
        if outcome.command and outcome.error_kind != "unrecognized_command":
            print(command_usage(outcome.command, prog), file=stdout)
            print('Use "help" to list all commands.', file=stdout)
        else:
            print(usage_banner(prog), file=stdout)
            print(all_commands_list(prog), file=stdout)
    return EXIT_VALIDATION_ERROR


def _is_failure(result: Any) -> bool:
    return isinstance(result, dict) and "status" in result and not result["status"]


def _print_result(result: Any, stdout) -> None:
    if isinstance(result, bytes):
        stdout.write(result.decode("utf-8", errors="replace"))
        return
    if isinstance(result, str):
        print(result, file=stdout)
        return
    print(json.dumps(result, indent=2), file=stdout)


def _run_command(
    outcome: ParseOutcome,
    *,
    ctx: CommandContext,
    stdout,
    stderr,
) -> int:
    secrets = _secret_arguments(outcome)
    handler = COMMANDS[outcome.command]
    try:
        result = handler(ctx, outcome.args)
    except CollaboratorUnavailableError as exc:
        return _print_error(stderr, "backend error", str(exc), code=EXIT_MISSING_BACKEND)
    except SafetyCheckError as exc:
        return _print_error(
            stderr, "safety check failed", str(exc), code=EXIT_VALIDATION_ERROR, secrets=secrets
        )
    except NetworkRequestError as exc:
        return _print_error(
            stderr, "network error", str(exc), code=EXIT_NETWORK_ERROR, secrets=secrets
        )
    except NetworkUnavailableError as exc:
        return _print_error(
            stderr, "network unavailable", str(exc), code=EXIT_NETWORK_ERROR, secrets=secrets
        )
    except BlockstackCLIError as exc:
        return _print_error(stderr, "error", str(exc), code=EXIT_VALIDATION_ERROR, secrets=secrets)
    except (OSError, ValueError) as exc:
        return _print_error(
            stderr, "command error", str(exc), code=EXIT_VALIDATION_ERROR, secrets=secrets
        )

    _print_result(result, stdout)
    return EXIT_VALIDATION_ERROR if _is_failure(result) else EXIT_SUCCESS


def _dispatch(
    table: dict,
    *,
    options: ExecutionOptions,
    config: CLIConfig,
    backends: Backends | None,
    prog: str,
    stdout,
    stderr,
) -> int:
    outcome = check_args(table["_"])
    if not outcome.success:
        return _print_parse_failure(outcome, prog=prog, stdout=stdout, stderr=stderr)

    if outcome.command == "help":
        topic = outcome.args[0] if outcome.args else "help"
        print(command_usage(topic, prog), file=stdout)
        return EXIT_SUCCESS

    ctx = CommandContext(
        network=NetworkClient(
            api_url=options.api_url or config.blockstack_api_url,
            utxo_service_url=config.utxo_service_url,
        ),
        options=options,
        config=config,
        backends=backends or Backends(),
    )
    return _run_command(outcome, ctx=ctx, stdout=stdout, stderr=stderr)


def main(
    argv: Sequence[str] | None = None,
    *,
    stdout=sys.stdout,
    stderr=sys.stderr,
    backends: Backends | None = None,
    prog: str = "blockstack-cli",
) -> int:
    table = get_cli_opts(list(sys.argv[1:] if argv is None else argv))

    try:
        options = ExecutionOptions.from_opts(table)
    except OptionsError as exc:
        return _print_error(stderr, "option error", str(exc), code=EXIT_VALIDATION_ERROR)

    try:
        config = load_cli_config(options.config_file(), options.network_type)
    except ConfigError as exc:
        return _print_error(stderr, "config error", str(exc), code=EXIT_VALIDATION_ERROR)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    previous_level = package_logger.level
    handler = _attach_log_handler(config, stderr)
    try:
        return _dispatch(
            table,
            options=options,
            config=config,
            backends=backends,
            prog=prog,
            stdout=stdout,
            stderr=stderr,
        )
    finally:
        package_logger.removeHandler(handler)
        package_logger.setLevel(previous_level)


if __name__ == "__main__":
    raise SystemExit(main())
