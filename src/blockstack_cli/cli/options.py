"""Global short-option scanning and the per-invocation execution options."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence

from blockstack_cli.cli.config import default_config_path

logger = logging.getLogger(__name__)

DEFAULT_OPTS = "eitUxc:C:F:B:P:D:G:N:H:T:"
TEST_ENV_VAR = "BLOCKSTACK_TEST"

DEFAULT_GRACE_PERIOD = 5000
DEFAULT_RECEIVE_FEES_PERIOD = 52595


class OptionsError(ValueError):
    """Raised when a global option carries an unusable value."""


def get_cli_opts(argv: Sequence[str], opts: str = DEFAULT_OPTS) -> dict[str, object]:
    """Extract short options from ``argv``.

    Just enough getopt(3) to be useful: only single-letter options are
    recognized, and they may appear anywhere in ``argv``. A letter followed by
    ``:`` in ``opts`` takes the next token as its value; other letters are
    boolean switches. Boolean switches are consumed wherever they occur; a
    value option takes its first occurrence only.

    Returns a mapping of option letter to ``True``/``False``, the option
    value, or ``None`` when a value option was not given. The key ``_`` holds
    the remaining tokens in order, with every ``--`` removed.
    """
    table: dict[str, object] = {}
    for index, letter in enumerate(opts):
        if letter == ":":
            continue
        takes_value = index + 1 < len(opts) and opts[index + 1] == ":"
        table[letter] = None if takes_value else False

    buffer: list[Optional[str]] = list(argv)
    for letter in list(table):
        flag = f"-{letter}"
        takes_value = table[letter] is None
        for index, token in enumerate(buffer):
            if token is None or token == "--" or token != flag:
                continue
            buffer[index] = None
            if not takes_value:
                table[letter] = True
                continue
            if index + 1 < len(buffer):
                table[letter] = buffer[index + 1]
                buffer[index + 1] = None
            else:
                logger.debug("option %s given without a value", flag)
            break

    table["_"] = [token for token in buffer if token is not None and token != "--"]
    return table


def _int_option(table: Mapping[str, object], letter: str, default: int) -> int:
    raw = table.get(letter)
    if raw is None or raw is False:
        return default
    try:
        return int(str(raw))
    except ValueError as exc:
        raise OptionsError(f"-{letter} must be an integer, got {raw!r}") from exc


def _str_option(table: Mapping[str, object], letter: str) -> Optional[str]:
    raw = table.get(letter)
    if raw is None or isinstance(raw, bool):
        return None
    return str(raw)


@dataclass(frozen=True)
class ExecutionOptions:
    """Request-scoped switches handed to every command handler."""

    estimate_only: bool = False
    tx_only: bool = False
    safety_checks: bool = True
    testnet: bool = False
    integration_test: bool = False
    config_path: Optional[str] = None
    burn_address: Optional[str] = None
    price_units: Optional[str] = None
    consensus_hash: Optional[str] = None
    fee_rate: Optional[str] = None
    grace_period: int = DEFAULT_GRACE_PERIOD
    receive_fees_period: int = DEFAULT_RECEIVE_FEES_PERIOD
    price_to_pay: Optional[str] = None
    api_url: Optional[str] = None
    broadcaster_url: Optional[str] = None

    @property
    def network_type(self) -> str:
        if self.testnet:
            return "testnet"
        if self.integration_test:
            return "regtest"
        return "mainnet"

    def config_file(self) -> Path:
        if self.config_path:
            return Path(self.config_path).expanduser()
        return default_config_path(self.network_type)

    @classmethod
    def from_opts(
        cls,
        table: Mapping[str, object],
        *,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "ExecutionOptions":
        env = os.environ if environ is None else environ
        return cls(
            estimate_only=bool(table.get("e")),
            tx_only=bool(table.get("x")),
            safety_checks=not table.get("U"),
            testnet=bool(table.get("t")),
            integration_test=bool(table.get("i")) or bool(env.get(TEST_ENV_VAR)),
            config_path=_str_option(table, "c"),
            burn_address=_str_option(table, "B"),
            price_units=_str_option(table, "D"),
            consensus_hash=_str_option(table, "C"),
            fee_rate=_str_option(table, "F"),
            grace_period=_int_option(table, "G", DEFAULT_GRACE_PERIOD),
            receive_fees_period=_int_option(table, "N", DEFAULT_RECEIVE_FEES_PERIOD),
            price_to_pay=_str_option(table, "P"),
            api_url=_str_option(table, "H"),
            broadcaster_url=_str_option(table, "T"),
        )


__all__ = [
    "DEFAULT_OPTS",
    "ExecutionOptions",
    "OptionsError",
    "get_cli_opts",
]
