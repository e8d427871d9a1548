"""Command handlers dispatched by name from ``main``."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Sequence

from blockstack_cli.cli.config import CLIConfig
from blockstack_cli.cli.options import ExecutionOptions
from blockstack_cli.client import NetworkClient
from blockstack_cli.collaborators import Backends
from blockstack_cli.errors import (
    NetworkRequestError,
    SafetyCheckError,
    UnconfirmedTransactionError,
)

logger = logging.getLogger(__name__)

ID_ADDRESS_PREFIX = "ID-"
DUST_LIMIT_SATOSHIS = 5500


@dataclass
class CommandContext:
    network: NetworkClient
    options: ExecutionOptions = field(default_factory=ExecutionOptions)
    config: CLIConfig = field(default_factory=CLIConfig)
    backends: Backends = field(default_factory=Backends)

    @property
    def broadcaster_url(self) -> str:
        return self.options.broadcaster_url or self.config.broadcast_service_url


Handler = Callable[[CommandContext, Sequence[str]], Any]


def _strip_id_prefix(id_address: str) -> str:
    if not id_address.startswith(ID_ADDRESS_PREFIX):
        raise ValueError("Must be an ID-address")
    return id_address[len(ID_ADDRESS_PREFIX):]


def _not_found(exc: NetworkRequestError, message: str) -> dict:
    if exc.status_code != 404:
        raise exc
    return {"error": message}


def _stringify_values(states: list) -> list:
    for state in states:
        for key in ("credit_value", "debit_value"):
            if key in state and state[key] is not None:
                state[key] = str(state[key])
    return states


def _read_text_or_literal(value: str) -> str:
    path = Path(value).expanduser()
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, ValueError):
        return value


# queries


def _run_whois(ctx: CommandContext, args: Sequence[str]) -> Any:
    try:
        return ctx.network.get_name_info(args[0])
    except NetworkRequestError as exc:
        return _not_found(exc, "Name not found")


def _run_price(ctx: CommandContext, args: Sequence[str]) -> Any:
    return ctx.network.get_name_price(args[0])


def _run_price_namespace(ctx: CommandContext, args: Sequence[str]) -> Any:
    return ctx.network.get_namespace_price(args[0])


def _run_names(ctx: CommandContext, args: Sequence[str]) -> Any:
    return ctx.network.get_names_owned(_strip_id_prefix(args[0]))


def _run_get_blockchain_record(ctx: CommandContext, args: Sequence[str]) -> Any:
    try:
        return ctx.network.get_blockchain_name_record(args[0])
    except NetworkRequestError as exc:
        return _not_found(exc, "Name not found")


def _run_get_blockchain_history(ctx: CommandContext, args: Sequence[str]) -> Any:
    """Merge every history page until the node returns an empty page."""
    name = args[0]
    history: dict = {}
    page = 0
    while True:
        try:
            results = ctx.network.get_name_history(name, page)
        except NetworkRequestError as exc:
            logger.debug("history of %s stopped at page %d: %s", name, page, exc)
            break
        if not results:
            break
        history.update(results)
        page += 1
    return history


def _run_get_namespace_blockchain_record(ctx: CommandContext, args: Sequence[str]) -> Any:
    try:
        return ctx.network.get_namespace_info(args[0])
    except NetworkRequestError as exc:
        return _not_found(exc, "Namespace not found")


def _run_get_zonefile(ctx: CommandContext, args: Sequence[str]) -> Any:
    try:
        name_info = ctx.network.get_name_info(args[0])
    except NetworkRequestError as exc:
        return _not_found(exc, "Name not found")

    zonefile_hash = name_info.get("zonefile_hash")
    if not zonefile_hash:
        return {"error": "Name has no zone file"}
    zonefile = ctx.network.get_zonefile(zonefile_hash)
    if zonefile is None:
        return {"error": "Zone file not found"}
    return zonefile


def _run_zonefile_push(ctx: CommandContext, args: Sequence[str]) -> Any:
    return ctx.network.broadcast_zonefile(_read_text_or_literal(args[0]))


def _run_get_confirmations(ctx: CommandContext, args: Sequence[str]) -> Any:
    try:
        block_height = ctx.network.get_block_height()
        tx_info = ctx.network.get_transaction_info(args[0])
    except UnconfirmedTransactionError:
        return {"blockHeight": "unconfirmed", "confirmations": 0}
    tx_height = int(tx_info["block_height"])
    return {"blockHeight": tx_height, "confirmations": block_height - tx_height + 1}


def _run_balance(ctx: CommandContext, args: Sequence[str]) -> Any:
    address = args[0]
    tokens = ctx.network.get_account_tokens(address).get("tokens") or []

    balances: dict[str, str] = {}
    for token_type in tokens:
        balances[token_type] = ctx.network.get_account_balance(address, token_type)
    utxos = ctx.network.get_utxos(address)
    balances["BTC"] = str(sum(int(utxo.get("value", 0)) for utxo in utxos))
    return balances


def _run_get_account_history(ctx: CommandContext, args: Sequence[str]) -> Any:
    address, start_block, end_block, page = args
    states = ctx.network.get_account_history_page(
        address,
        int(start_block),
        int(end_block),
        int(page),
    )
    return _stringify_values(states)


def _run_get_account_at(ctx: CommandContext, args: Sequence[str]) -> Any:
    return _stringify_values(ctx.network.get_account_at(args[0], int(args[1])))


# keys


def _run_get_address(ctx: CommandContext, args: Sequence[str]) -> Any:
    return ctx.backends.require_key_deriver("get_address").get_address(args[0])


def _run_get_owner_keys(ctx: CommandContext, args: Sequence[str]) -> Any:
    deriver = ctx.backends.require_key_deriver("get_owner_keys")
    max_index = int(args[1]) if len(args) > 1 else 1
    return [deriver.get_owner_keys(args[0], index) for index in range(max_index)]


def _run_get_payment_key(ctx: CommandContext, args: Sequence[str]) -> Any:
    deriver = ctx.backends.require_key_deriver("get_payment_key")
    return [deriver.get_payment_key(args[0])]


def _run_make_keychain(ctx: CommandContext, args: Sequence[str]) -> Any:
    deriver = ctx.backends.require_key_deriver("make_keychain")
    mnemonic = args[0] if args else deriver.generate_mnemonic()
    return {
        "mnemonic": mnemonic,
        "keyInfo": deriver.get_owner_keys(mnemonic, 0),
        "paymentKeyInfo": deriver.get_payment_key(mnemonic),
    }


# profiles


def _run_lookup(ctx: CommandContext, args: Sequence[str]) -> Any:
    store = ctx.backends.require_object_store("lookup")
    name = args[0]
    try:
        name_info = ctx.network.get_name_info(name)
    except NetworkRequestError as exc:
        return _not_found(exc, "Name not found")
    zonefile = name_info.get("zonefile")
    profile = store.lookup_profile(
        name,
        zonefile=zonefile,
        owner_address=name_info.get("address"),
    )
    return {"profile": profile, "zonefile": zonefile}


def _run_profile_sign(ctx: CommandContext, args: Sequence[str]) -> Any:
    store = ctx.backends.require_object_store("profile_sign")
    profile = json.loads(Path(args[0]).expanduser().read_text(encoding="utf-8"))
    return store.sign_profile(profile, args[1])


def _load_profile_token(path: str) -> str:
    raw = Path(path).expanduser().read_text(encoding="utf-8").strip()
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return raw
    if isinstance(parsed, list) and parsed and isinstance(parsed[0], dict):
        return str(parsed[0]["token"])
    if isinstance(parsed, dict) and "token" in parsed:
        return str(parsed["token"])
    raise ValueError(f"{path} does not contain a signed profile")


def _run_profile_verify(ctx: CommandContext, args: Sequence[str]) -> Any:
    store = ctx.backends.require_object_store("profile_verify")
    key_or_address = args[1]
    if key_or_address.startswith(ID_ADDRESS_PREFIX):
        key_or_address = key_or_address[len(ID_ADDRESS_PREFIX):]
    return store.verify_profile(_load_profile_token(args[0]), key_or_address)


def _run_profile_store(ctx: CommandContext, args: Sequence[str]) -> Any:
    store = ctx.backends.require_object_store("profile_store")
    user_id, profile_path, owner_key = args[0], args[1], args[2]
    gaia_hub = args[3] if len(args) > 3 else None
    if user_id.startswith(ID_ADDRESS_PREFIX) and not gaia_hub:
        raise ValueError("GAIA_HUB is required when USER_ID is an ID-address")

    signed_profile = Path(profile_path).expanduser().read_text(encoding="utf-8")
    urls = store.store_profile(
        user_id=user_id,
        signed_profile=signed_profile,
        private_key=owner_key,
        gaia_hub=gaia_hub,
    )
    return {"profileUrls": list(urls)}


# transactions


def _transaction_handler(command: str) -> Handler:
    def run(ctx: CommandContext, args: Sequence[str]) -> Any:
        backend = ctx.backends.require_transactions(command)
        return backend.execute(
            command,
            tuple(args),
            ctx.options,
            broadcaster_url=ctx.broadcaster_url,
        )

    run.__name__ = f"_run_{command}"
    return run


def _run_send_btc(ctx: CommandContext, args: Sequence[str]) -> Any:
    amount = int(args[1])
    if ctx.options.safety_checks and amount <= DUST_LIMIT_SATOSHIS:
        raise SafetyCheckError(f"Invalid amount (must be greater than {DUST_LIMIT_SATOSHIS})")
    return _transaction_handler("send_btc")(ctx, args)


_TRANSACTION_COMMANDS = (
    "announce",
    "name_import",
    "namespace_preorder",
    "namespace_ready",
    "namespace_reveal",
    "register",
    "register_subdomain",
    "renew",
    "revoke",
    "send_tokens",
    "transfer",
    "tx_preorder",
    "tx_register",
    "update",
)

COMMANDS: dict[str, Handler] = {
    "balance": _run_balance,
    "get_account_at": _run_get_account_at,
    "get_account_history": _run_get_account_history,
    "get_address": _run_get_address,
    "get_blockchain_history": _run_get_blockchain_history,
    "get_blockchain_record": _run_get_blockchain_record,
    "get_confirmations": _run_get_confirmations,
    "get_namespace_blockchain_record": _run_get_namespace_blockchain_record,
    "get_owner_keys": _run_get_owner_keys,
    "get_payment_key": _run_get_payment_key,
    "get_zonefile": _run_get_zonefile,
    "lookup": _run_lookup,
    "make_keychain": _run_make_keychain,
    "names": _run_names,
    "price": _run_price,
    "price_namespace": _run_price_namespace,
    "profile_sign": _run_profile_sign,
    "profile_store": _run_profile_store,
    "profile_verify": _run_profile_verify,
    "send_btc": _run_send_btc,
    "whois": _run_whois,
    "zonefile_push": _run_zonefile_push,
}
COMMANDS.update({name: _transaction_handler(name) for name in _TRANSACTION_COMMANDS})


__all__ = ["COMMANDS", "CommandContext", "Handler"]
