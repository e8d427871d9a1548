"""blockstack-cli public surface."""

from blockstack_cli.cli.reconcile import ReconcileResult, reconcile, reconcile_arguments
from blockstack_cli.cli.schema import SCHEMA, ArgumentSpec, CommandSchema, CommandSpec
from blockstack_cli.cli.validate import ParseOutcome, ValidationResult, check_args, validate
from blockstack_cli.client import NetworkClient
from blockstack_cli.collaborators import (
    Backends,
    KeyDeriverProtocol,
    ObjectStoreProtocol,
    TransactionBackendProtocol,
)
from blockstack_cli.errors import (
    BlockstackCLIError,
    CollaboratorUnavailableError,
    NetworkRequestError,
    NetworkUnavailableError,
    SafetyCheckError,
    SchemaDefinitionError,
    UnconfirmedTransactionError,
)

__all__ = [
    "BlockstackCLIError",
    "SchemaDefinitionError",
    "NetworkUnavailableError",
    "NetworkRequestError",
    "UnconfirmedTransactionError",
    "CollaboratorUnavailableError",
    "SafetyCheckError",
    "ArgumentSpec",
    "CommandSpec",
    "CommandSchema",
    "SCHEMA",
    "ReconcileResult",
    "reconcile",
    "reconcile_arguments",
    "ParseOutcome",
    "ValidationResult",
    "check_args",
    "validate",
    "NetworkClient",
    "Backends",
    "KeyDeriverProtocol",
    "ObjectStoreProtocol",
    "TransactionBackendProtocol",
]
