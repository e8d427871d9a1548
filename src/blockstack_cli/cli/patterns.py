"""Validation patterns for command arguments.

Every pattern is applied with full-string semantics (``re.fullmatch``).
"""

from __future__ import annotations

NAME_PATTERN = r"^([0-9a-z_.+-]{3,37})$"

NAMESPACE_PATTERN = r"^([0-9a-z_-]{1,19})$"

# base58 alphabet
ADDRESS_CHARS = "[123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz]{1,35}"

ADDRESS_PATTERN = rf"^({ADDRESS_CHARS})$"

ID_ADDRESS_PATTERN = rf"^ID-{ADDRESS_CHARS}$"

PRIVATE_KEY_PATTERN = r"^([0-9a-f]{64,66})$"

PUBLIC_KEY_PATTERN = r"^([0-9a-f]{66,130})$"

INT_PATTERN = r"^-?[0-9]+$"

UINT_PATTERN = r"^[0-9]+$"

ZONEFILE_HASH_PATTERN = r"^([0-9a-f]{40})$"

SUBDOMAIN_PATTERN = r"^([0-9a-z_+-]{1,37})\.([0-9a-z_.+-]{3,37})$"

TXID_PATTERN = r"^([0-9a-f]{64})$"

BLOCKSTACK_ID_PATTERN = f"{NAME_PATTERN}|{SUBDOMAIN_PATTERN}"

PRICE_BUCKETS_PATTERN = r"^([0-9]{1,2},){15}[0-9]{1,2}$"

__all__ = [
    "NAME_PATTERN",
    "NAMESPACE_PATTERN",
    "ADDRESS_CHARS",
    "ADDRESS_PATTERN",
    "ID_ADDRESS_PATTERN",
    "PRIVATE_KEY_PATTERN",
    "PUBLIC_KEY_PATTERN",
    "INT_PATTERN",
    "UINT_PATTERN",
    "ZONEFILE_HASH_PATTERN",
    "SUBDOMAIN_PATTERN",
    "TXID_PATTERN",
    "BLOCKSTACK_ID_PATTERN",
    "PRICE_BUCKETS_PATTERN",
]
