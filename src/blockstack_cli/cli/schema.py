"""Declarative command grammar for blockstack-cli.

Each command is a :class:`CommandSpec` holding its ordered
:class:`ArgumentSpec` list. The order of ``argument_specs`` is the positional
order; ``min_args`` says how many leading arguments are required and the rest
are optional trailing arguments.

The table is built and checked once at import. An authoring mistake (duplicate
names, bad arity, missing ``semantic_type``, an uncompilable pattern) raises
during import instead of surfacing per invocation.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Dict, Iterable, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from blockstack_cli.cli.patterns import (
    ADDRESS_PATTERN,
    BLOCKSTACK_ID_PATTERN,
    ID_ADDRESS_PATTERN,
    INT_PATTERN,
    NAME_PATTERN,
    NAMESPACE_PATTERN,
    PRICE_BUCKETS_PATTERN,
    PRIVATE_KEY_PATTERN,
    PUBLIC_KEY_PATTERN,
    SUBDOMAIN_PATTERN,
    TXID_PATTERN,
    UINT_PATTERN,
    ZONEFILE_HASH_PATTERN,
)
from blockstack_cli.errors import SchemaDefinitionError


class ArgumentSpec(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: Optional[str] = None
    semantic_type: str = Field(..., min_length=1)
    pattern: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("argument name must not be blank")
        return value

    @field_validator("pattern")
    @classmethod
    def _pattern_compiles(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"invalid pattern {value!r}: {exc}") from exc
        return value

    def accepts(self, value: str) -> bool:
        """Return True when ``value`` satisfies this slot's pattern."""
        if self.pattern is None:
            return bool(value)
        return re.fullmatch(self.pattern, value) is not None


class CommandSpec(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(..., min_length=1)
    argument_specs: Tuple[ArgumentSpec, ...]
    min_args: int = Field(..., ge=0)
    max_args: int = Field(..., ge=0)
    help_text: str
    group: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def _check_arity(self) -> "CommandSpec":
        if self.max_args != len(self.argument_specs):
            raise ValueError(
                f"{self.name}: max_args={self.max_args} but "
                f"{len(self.argument_specs)} arguments are declared"
            )
        if self.min_args > self.max_args:
            raise ValueError(f"{self.name}: min_args exceeds max_args")

        seen: set[str] = set()
        for spec in self.argument_specs:
            if spec.name is None:
                continue
            if spec.name in seen:
                raise ValueError(f"{self.name}: duplicate argument name {spec.name!r}")
            seen.add(spec.name)
        return self

    def argument(self, name: str) -> Optional[ArgumentSpec]:
        for spec in self.argument_specs:
            if spec.name == name:
                return spec
        return None

    def is_optional(self, index: int) -> bool:
        """True when the zero-based argument ``index`` may be omitted."""
        return index + 1 > self.min_args


class CommandSchema:
    """Closed, read-only table of commands keyed by name."""

    def __init__(self, commands: Iterable[CommandSpec]) -> None:
        table: dict[str, CommandSpec] = {}
        for command in commands:
            if command.name in table:
                raise SchemaDefinitionError(f"duplicate command {command.name!r}")
            for index, spec in enumerate(command.argument_specs):
                # keyword invocation and usage rendering both need a name
                if spec.name is None:
                    raise SchemaDefinitionError(
                        f"command {command.name!r} argument {index} is missing a name"
                    )
            table[command.name] = command
        self._commands = MappingProxyType(table)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __len__(self) -> int:
        return len(self._commands)

    def lookup(self, name: str) -> Optional[CommandSpec]:
        return self._commands.get(name)

    def all_commands(self) -> Tuple[CommandSpec, ...]:
        return tuple(self._commands.values())

    def grouped_commands(self) -> Dict[str, Tuple[CommandSpec, ...]]:
        groups: dict[str, list[CommandSpec]] = {}
        for command in self._commands.values():
            groups.setdefault(command.group, []).append(command)
        return {group: tuple(groups[group]) for group in sorted(groups)}


def _arg(name: str, semantic_type: str, pattern: Optional[str] = None) -> ArgumentSpec:
    return ArgumentSpec(name=name, semantic_type=semantic_type, pattern=pattern)


def _command(
    name: str,
    *,
    args: Iterable[ArgumentSpec],
    min_args: int,
    max_args: int,
    help_text: str,
    group: str,
) -> CommandSpec:
    return CommandSpec(
        name=name,
        argument_specs=tuple(args),
        min_args=min_args,
        max_args=max_args,
        help_text=help_text,
        group=group,
    )


GROUP_ACCOUNTS = "Account Management"
GROUP_NAMES = "Blockstack ID Management"
GROUP_CLI = "CLI"
GROUP_KEYS = "Key Management"
GROUP_NAMESPACES = "Namespace Operations"
GROUP_PEERS = "Peer Services"
GROUP_PROFILES = "Profiles"
GROUP_QUERIES = "Querying Blockstack IDs"


_COMMANDS = (
    _command(
        "announce",
        args=[
            _arg("message_hash", "zonefile_hash", ZONEFILE_HASH_PATTERN),
            _arg("owner_key", "private_key", PRIVATE_KEY_PATTERN),
        ],
        min_args=2,
        max_args=2,
        help_text=(
            "Broadcast a message on the blockchain for subscribers to read.  "
            "The MESSAGE_HASH argument must be the hash of a previously-announced zone file.  "
            "The OWNER_KEY used to sign the transaction must correspond to the Blockstack ID "
            "to which other users have already subscribed."
        ),
        group=GROUP_PEERS,
    ),
    _command(
        "balance",
        args=[_arg("address", "address", ADDRESS_PATTERN)],
        min_args=1,
        max_args=1,
        help_text=(
            "Query the balance of an account.  Returns the balances of each kind of token "
            "that the account owns.  The balances will be in the *smallest possible units* of "
            "the token (i.e. satoshis for BTC, microStacks for Stacks, etc.)."
        ),
        group=GROUP_ACCOUNTS,
    ),
    _command(
        "get_account_history",
        args=[
            _arg("address", "address", ADDRESS_PATTERN),
            _arg("startblock", "integer", UINT_PATTERN),
            _arg("endblock", "integer", UINT_PATTERN),
            _arg("page", "integer", UINT_PATTERN),
        ],
        min_args=4,
        max_args=4,
        help_text=(
            "Query the history of account debits and credits over a given block range.  "
            "Returns the history one page at a time.  An empty result indicates that the page "
            "number has exceeded the number of historic operations in the given block range."
        ),
        group=GROUP_ACCOUNTS,
    ),
    _command(
        "get_account_at",
        args=[
            _arg("address", "address", ADDRESS_PATTERN),
            _arg("blocknumber", "integer", UINT_PATTERN),
        ],
        min_args=2,
        max_args=2,
        help_text=(
            "Query the list of token debits and credits on a given address that occurred "
            "at a particular block height.  Does not include BTC debits and credits."
        ),
        group=GROUP_ACCOUNTS,
    ),
    _command(
        "get_address",
        args=[_arg("private_key", "private_key", PRIVATE_KEY_PATTERN)],
        min_args=1,
        max_args=1,
        help_text="Get the address of a private key.",
        group=GROUP_KEYS,
    ),
    _command(
        "get_blockchain_record",
        args=[_arg("blockstack_id", "blockstack_id", BLOCKSTACK_ID_PATTERN)],
        min_args=1,
        max_args=1,
        help_text=(
            "Get the low-level blockchain-hosted state for a Blockstack ID.  This command "
            "is used mainly for debugging and diagnostics.  You should not rely on it to be "
            "stable."
        ),
        group=GROUP_QUERIES,
    ),
    _command(
        "get_blockchain_history",
        args=[_arg("blockstack_id", "blockstack_id", BLOCKSTACK_ID_PATTERN)],
        min_args=1,
        max_args=1,
        help_text=(
            "Get the low-level blockchain-hosted history of operations on a Blockstack ID.  "
            "This command is used mainly for debugging and diagnostics, and is not guaranteed "
            "to be stable across releases."
        ),
        group=GROUP_QUERIES,
    ),
    _command(
        "get_confirmations",
        args=[_arg("txid", "transaction_id", TXID_PATTERN)],
        min_args=1,
        max_args=1,
        help_text="Get the number of confirmations for a transaction.",
        group=GROUP_PEERS,
    ),
    _command(
        "get_namespace_blockchain_record",
        args=[_arg("namespace_id", "namespace_id", NAMESPACE_PATTERN)],
        min_args=1,
        max_args=1,
        help_text=(
            "Get the low-level blockchain-hosted state for a Blockstack namespace.  This "
            "command is used mainly for debugging and diagnostics, and is not guaranteed to be "
            "stable across releases."
        ),
        group=GROUP_NAMESPACES,
    ),
    _command(
        "get_owner_keys",
        args=[
            _arg("backup_phrase", "backup_phrase"),
            _arg("index", "integer", UINT_PATTERN),
        ],
        min_args=1,
        max_args=2,
        help_text=(
            "Get the list of owner private keys and ID-addresses from a 12-word backup phrase.  "
            "Pass non-zero values for INDEX to generate the sequence of ID-addresses that can "
            "be used to own Blockstack IDs."
        ),
        group=GROUP_KEYS,
    ),
    _command(
        "get_payment_key",
        args=[_arg("backup_phrase", "12_words")],
        min_args=1,
        max_args=1,
        help_text="Get the payment private key from a 12-word backup phrase.",
        group=GROUP_KEYS,
    ),
    _command(
        "get_zonefile",
        args=[_arg("blockstack_id", "blockstack_id", BLOCKSTACK_ID_PATTERN)],
        min_args=1,
        max_args=1,
        help_text="Get the current zone file for a Blockstack ID",
        group=GROUP_PEERS,
    ),
    _command(
        "help",
        args=[_arg("command", "command")],
        min_args=0,
        max_args=1,
        help_text="Get the usage string for a CLI command",
        group=GROUP_CLI,
    ),
    _command(
        "lookup",
        args=[_arg("blockstack_id", "blockstack_id", BLOCKSTACK_ID_PATTERN)],
        min_args=1,
        max_args=1,
        help_text="Get and authenticate the profile and zone file for a Blockstack ID",
        group=GROUP_QUERIES,
    ),
    _command(
        "names",
        args=[_arg("id_address", "id-address", ID_ADDRESS_PATTERN)],
        min_args=1,
        max_args=1,
        help_text="Get the list of Blockstack IDs owned by an ID-address.",
        group=GROUP_QUERIES,
    ),
    _command(
        "make_keychain",
        args=[_arg("backup_phrase", "12_word")],
        min_args=0,
        max_args=1,
        help_text=(
            "Generate the owner and payment private keys, optionally from a given 12-word "
            "backup phrase.  If no backup phrase is given, a new one will be generated."
        ),
        group=GROUP_KEYS,
    ),
    _command(
        "name_import",
        args=[
            _arg("blockstack_id", "blockstack_id", NAME_PATTERN),
            _arg("id_address", "id-address", ID_ADDRESS_PATTERN),
            _arg("gaia_hub", "url", ".+"),
            _arg("reveal_key", "private_key", PRIVATE_KEY_PATTERN),
            _arg("zonefile", "path", ".+"),
            _arg("zonefile_hash", "zonefile_hash", ZONEFILE_HASH_PATTERN),
        ],
        min_args=4,
        max_args=6,
        help_text=(
            "Import a name into a namespace you revealed.  The REVEAL_KEY must be the same as "
            "the key that revealed the namespace.  You can only import a name into a namespace "
            "if the namespace has not yet been launched (i.e. via `namespace_ready`), and if "
            "the namespace was revealed less than a year ago.\n"
            "\n"
            'The "GAIA_HUB" argument is a URL to a Gaia hub, such as '
            "https://gaia.blockstack.org.  If you specify an argument for \"ZONEFILE,\" then "
            "this argument is ignored in favor of the zone file.  Similarly, if you specify an "
            'argument for "ZONEFILE_HASH," then it is used in favor of both "ZONEFILE" and '
            '"GAIA_URL."'
        ),
        group=GROUP_NAMESPACES,
    ),
    _command(
        "namespace_preorder",
        args=[
            _arg("namespace_id", "namespace_id", NAMESPACE_PATTERN),
            _arg("reveal_address", "address", ADDRESS_PATTERN),
            _arg("payment_key", "private_key", PRIVATE_KEY_PATTERN),
        ],
        min_args=3,
        max_args=3,
        help_text=(
            "Preorder a namespace.  This is the first of three steps to creating a namespace.  "
            "Once this transaction is confirmed, you will need to use the `namespace_reveal` "
            "command to reveal the namespace (within 24 hours, or 144 blocks)."
        ),
        group=GROUP_NAMESPACES,
    ),
    _command(
        "namespace_reveal",
        args=[
            _arg("namespace_id", "namespace_id", NAMESPACE_PATTERN),
            _arg("reveal_address", "address", ADDRESS_PATTERN),
            _arg("version", "2-byte-integer", INT_PATTERN),
            _arg("lifetime", "4-byte-integer", INT_PATTERN),
            _arg("coefficient", "1-byte-integer", INT_PATTERN),
            _arg("base", "1-byte-integer", INT_PATTERN),
            _arg("price_buckets", "csv-of-16-nybbles", PRICE_BUCKETS_PATTERN),
            _arg("nonalpha_discount", "nybble", INT_PATTERN),
            _arg("no_vowel_discount", "nybble", INT_PATTERN),
            _arg("payment_key", "private_key", PRIVATE_KEY_PATTERN),
        ],
        min_args=10,
        max_args=10,
        help_text=(
            "Reveal a preordered namespace, and set the price curve and payment options.  "
            "This is the second of three steps required to create a namespace, and must be "
            'done shortly after the associated "namespace_preorder" command.'
        ),
        group=GROUP_NAMESPACES,
    ),
    _command(
        "namespace_ready",
        args=[
            _arg("namespace_id", "namespace_id", NAMESPACE_PATTERN),
            _arg("reveal_key", "private_key", PRIVATE_KEY_PATTERN),
        ],
        min_args=2,
        max_args=2,
        help_text=(
            "Launch a revealed namespace.  This is the third and final step of creating a "
            "namespace.  Once launched, you will not be able to import names anymore."
        ),
        group=GROUP_NAMESPACES,
    ),
    _command(
        "price",
        args=[_arg("blockstack_id", "blockstack_id", NAME_PATTERN)],
        min_args=1,
        max_args=1,
        help_text="Get the price of a name",
        group=GROUP_QUERIES,
    ),
    _command(
        "price_namespace",
        args=[_arg("namespace_id", "namespace_id", NAMESPACE_PATTERN)],
        min_args=1,
        max_args=1,
        help_text="Get the price of a namespace",
        group=GROUP_NAMESPACES,
    ),
    _command(
        "profile_sign",
        args=[
            _arg("profile", "path"),
            _arg("owner_key", "private_key", PRIVATE_KEY_PATTERN),
        ],
        min_args=2,
        max_args=2,
        help_text=(
            "Sign a profile on disk with a given owner private key.  Print out the signed "
            "profile JWT."
        ),
        group=GROUP_PROFILES,
    ),
    _command(
        "profile_store",
        args=[
            _arg(
                "user_id",
                "name-or-id-address",
                f"{NAME_PATTERN}|{SUBDOMAIN_PATTERN}|{ID_ADDRESS_PATTERN}",
            ),
            _arg("profile", "path"),
            _arg("owner_key", "private_key", PRIVATE_KEY_PATTERN),
            _arg("gaia_hub", "url"),
        ],
        min_args=3,
        max_args=4,
        help_text=(
            "Store a profile on disk to a Gaia hub.  USER_ID can be either a Blockstack ID or "
            "an ID-address.  If USER_ID is an ID-address, then GAIA_HUB is a required "
            "argument.  If USER_ID is a Blockstack ID, then the GAIA_HUB will be looked up "
            "using the Blockstack ID's zonefile."
        ),
        group=GROUP_PROFILES,
    ),
    _command(
        "profile_verify",
        args=[
            _arg("profile", "path"),
            _arg("id_address", "id-address", f"{ID_ADDRESS_PATTERN}|{PUBLIC_KEY_PATTERN}"),
        ],
        min_args=2,
        max_args=2,
        help_text="Verify a profile on disk using a name or a public key (ID_ADDRESS).",
        group=GROUP_PROFILES,
    ),
    _command(
        "renew",
        args=[
            _arg("blockstack_id", "on-chain-blockstack_id", NAME_PATTERN),
            _arg("owner_key", "private_key", PRIVATE_KEY_PATTERN),
            _arg("payment_key", "private_key", PRIVATE_KEY_PATTERN),
            _arg("new_id_address", "id-address", ID_ADDRESS_PATTERN),
            _arg("zonefile", "path"),
            _arg("zonefile_hash", "zonefile_hash", ZONEFILE_HASH_PATTERN),
        ],
        min_args=3,
        max_args=6,
        help_text=(
            "Renew a name.  Optionally transfer it to a new owner address (NEW_ID_ADDRESS), "
            "and optionally load up and give it a new zone file on disk (ZONEFILE).  You will "
            'need to later use "zonefile_push" to replicate the zone file to the Blockstack '
            "peer network once the transaction confirms."
        ),
        group=GROUP_NAMES,
    ),
    _command(
        "register",
        args=[
            _arg("blockstack_id", "on-chain-blockstack_id", NAME_PATTERN),
            _arg("owner_key", "private_key", PRIVATE_KEY_PATTERN),
            _arg("payment_key", "private_key", PRIVATE_KEY_PATTERN),
            _arg("gaia_hub", "url"),
            _arg("zonefile", "path"),
        ],
        min_args=4,
        max_args=5,
        help_text=(
            "Register a name the easy way.  This will generate and send two transactions, "
            "and generate and replicate a zone file with the given Gaia hub URL (GAIA_HUB).  "
            "You can optionally specify a path to a custom zone file on disk (ZONEFILE)."
        ),
        group=GROUP_NAMES,
    ),
    _command(
        "register_subdomain",
        args=[
            _arg("blockstack_id", "blockstack_id", SUBDOMAIN_PATTERN),
            _arg("owner_key", "private_key", PRIVATE_KEY_PATTERN),
            _arg("gaia_hub", "url"),
            _arg("registrar", "url"),
            _arg("zonefile", "path"),
        ],
        min_args=4,
        max_args=5,
        help_text=(
            "Register a subdomain.  This will generate and sign a subdomain zone file record "
            "with the given GAIA_HUB URL and send it to the given subdomain registrar "
            "(REGISTRAR)."
        ),
        group=GROUP_NAMES,
    ),
    _command(
        "revoke",
        args=[
            _arg("blockstack_id", "on-chain-blockstack_id", NAME_PATTERN),
            _arg("owner_key", "private_key", PRIVATE_KEY_PATTERN),
            _arg("payment_key", "private_key", PRIVATE_KEY_PATTERN),
        ],
        min_args=3,
        max_args=3,
        help_text="Revoke a name.  This renders it unusable until it expires (if ever).",
        group=GROUP_NAMES,
    ),
    _command(
        "send_btc",
        args=[
            _arg("recipient_address", "address", ADDRESS_PATTERN),
            _arg("amount", "satoshis", INT_PATTERN),
            _arg("payment_key", "private_key", PRIVATE_KEY_PATTERN),
        ],
        min_args=3,
        max_args=3,
        help_text="Send some Bitcoin (in satoshis) from a payment key to an address.",
        group=GROUP_ACCOUNTS,
    ),
    _command(
        "send_tokens",
        args=[
            _arg("address", "address", ADDRESS_PATTERN),
            _arg("type", "token-type", f"{NAMESPACE_PATTERN}|^STACKS$"),
            _arg("amount", "integer", UINT_PATTERN),
            _arg("payment_key", "private_key", PRIVATE_KEY_PATTERN),
            _arg("memo", "string", r"^.{0,34}$"),
        ],
        min_args=4,
        max_args=5,
        help_text=(
            'Send tokens to the given ADDRESS.  The only supported TOKEN-TYPE is "STACKS".  '
            "Optionally include a memo string (MEMO) up to 34 characters long."
        ),
        group=GROUP_ACCOUNTS,
    ),
    _command(
        "transfer",
        args=[
            _arg("blockstack_id", "on-chain-blockstack_id", NAME_PATTERN),
            _arg("new_id_address", "id-address", ID_ADDRESS_PATTERN),
            _arg("keep_zonefile", "true-or-false", r"^true$|^false$"),
            _arg("owner_key", "private_key", PRIVATE_KEY_PATTERN),
            _arg("payment_key", "private_key", PRIVATE_KEY_PATTERN),
        ],
        min_args=5,
        max_args=5,
        help_text=(
            "Transfer a Blockstack ID to a new address (NEW_ID_ADDRESS).  Optionally preserve "
            "its zone file (KEEP_ZONEFILE)."
        ),
        group=GROUP_NAMES,
    ),
    _command(
        "tx_preorder",
        args=[
            _arg("blockstack_id", "on-chain-blockstack_id", NAME_PATTERN),
            _arg("id_address", "id-address", ID_ADDRESS_PATTERN),
            _arg("payment_key", "private_key", PRIVATE_KEY_PATTERN),
        ],
        min_args=3,
        max_args=3,
        help_text=(
            "Generate and send NAME_PREORDER transaction, for a Blockstack ID to be owned "
            "by a given ID_ADDRESS."
        ),
        group=GROUP_NAMES,
    ),
    _command(
        "tx_register",
        args=[
            _arg("blockstack_id", "on-chain-blockstack_id", NAME_PATTERN),
            _arg("id_address", "id-address", ID_ADDRESS_PATTERN),
            _arg("payment_key", "private_key", PRIVATE_KEY_PATTERN),
            _arg("zonefile", "path"),
            _arg("zonefile_hash", "zonefile_hash", ZONEFILE_HASH_PATTERN),
        ],
        min_args=3,
        max_args=5,
        help_text=(
            "Generate and send a NAME_REGISTRATION transaction, assigning the given "
            "BLOCKSTACK_ID to the given ID_ADDRESS.  Optionally pair the Blockstack ID with a "
            "zone file (ZONEFILE) or the hash of the zone file (ZONEFILE_HASH).  You will need "
            "to push the zone file to the peer network after the transaction confirms (i.e. "
            'with "zonefile_push").'
        ),
        group=GROUP_NAMES,
    ),
    _command(
        "update",
        args=[
            _arg("blockstack_id", "on-chain-blockstack_id", NAME_PATTERN),
            _arg("zonefile", "path"),
            _arg("owner_key", "private_key", PRIVATE_KEY_PATTERN),
            _arg("payment_key", "private_key", PRIVATE_KEY_PATTERN),
            _arg("zonefile_hash", "zonefile_hash", ZONEFILE_HASH_PATTERN),
        ],
        min_args=4,
        max_args=5,
        help_text=(
            "Update the zonefile for an on-chain Blockstack ID.  Once the transaction "
            "confirms, you will need to push the zone file to the Blockstack peer network with "
            '"zonefile_push."'
        ),
        group=GROUP_NAMES,
    ),
    _command(
        "whois",
        args=[_arg("blockstack_id", "blockstack_id", BLOCKSTACK_ID_PATTERN)],
        min_args=1,
        max_args=1,
        help_text="Look up the zone file and owner of a Blockstack ID",
        group=GROUP_QUERIES,
    ),
    _command(
        "zonefile_push",
        args=[_arg("zonefile", "path")],
        min_args=1,
        max_args=1,
        help_text="Push a zone file on disk to the Blockstack peer network.",
        group=GROUP_PEERS,
    ),
)

SCHEMA = CommandSchema(_COMMANDS)

__all__ = ["ArgumentSpec", "CommandSpec", "CommandSchema", "SCHEMA"]
