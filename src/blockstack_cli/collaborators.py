"""Backend contracts for key derivation, profile storage and transactions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional, Protocol, Sequence

from blockstack_cli.errors import CollaboratorUnavailableError

if TYPE_CHECKING:
    from blockstack_cli.cli.options import ExecutionOptions


class KeyDeriverProtocol(Protocol):
    def get_address(self, private_key: str) -> dict: ...

    def get_owner_keys(self, mnemonic: str, index: int) -> dict: ...

    def get_payment_key(self, mnemonic: str) -> dict: ...

    def generate_mnemonic(self) -> str: ...


class ObjectStoreProtocol(Protocol):
    def sign_profile(self, profile: dict, private_key: str) -> Any: ...

    def verify_profile(self, token: str, public_key_or_address: str) -> dict: ...

    def store_profile(
        self,
        *,
        user_id: str,
        signed_profile: str,
        private_key: str,
        gaia_hub: Optional[str] = None,
    ) -> list[str]: ...

    def lookup_profile(
        self,
        name: str,
        *,
        zonefile: Optional[str],
        owner_address: Optional[str],
    ) -> dict: ...


class TransactionBackendProtocol(Protocol):
    """Builds, signs and (unless ``tx_only``) broadcasts on-chain operations."""

    def execute(
        self,
        command: str,
        args: Sequence[str],
        options: "ExecutionOptions",
        *,
        broadcaster_url: str,
    ) -> Any: ...


@dataclass(frozen=True)
class Backends:
    key_deriver: Optional[KeyDeriverProtocol] = None
    object_store: Optional[ObjectStoreProtocol] = None
    transactions: Optional[TransactionBackendProtocol] = None

    def require_key_deriver(self, command: str) -> KeyDeriverProtocol:
        if self.key_deriver is None:
            raise CollaboratorUnavailableError(f"{command} requires a key derivation backend")
        return self.key_deriver

    def require_object_store(self, command: str) -> ObjectStoreProtocol:
        if self.object_store is None:
            raise CollaboratorUnavailableError(f"{command} requires a profile storage backend")
        return self.object_store

    def require_transactions(self, command: str) -> TransactionBackendProtocol:
        if self.transactions is None:
            raise CollaboratorUnavailableError(f"{command} requires a transaction backend")
        return self.transactions


__all__ = [
    "Backends",
    "KeyDeriverProtocol",
    "ObjectStoreProtocol",
    "TransactionBackendProtocol",
]
