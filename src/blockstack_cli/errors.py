"""Client error types."""

from __future__ import annotations


class BlockstackCLIError(RuntimeError):
    """Base client error."""


class SchemaDefinitionError(BlockstackCLIError):
    """The command schema table is malformed."""


class NetworkUnavailableError(BlockstackCLIError):
    """Blockstack Core or the UTXO service could not be reached."""


class NetworkRequestError(NetworkUnavailableError):
    """A network service returned an HTTP error response."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        detail: object | None = None,
        body: object | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail
        self.body = body


class UnconfirmedTransactionError(BlockstackCLIError):
    """Transaction has not been included in a block yet."""


class CollaboratorUnavailableError(BlockstackCLIError):
    """Command needs a backend that was not supplied."""


class SafetyCheckError(BlockstackCLIError):
    """A pre-flight safety check rejected the operation."""
