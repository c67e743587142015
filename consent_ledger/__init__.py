"""
Consent Ledger
Scoped consent grants, revokes and access checks over a key/value ledger
"""

__version__ = "0.1.0"

# Core exports
from .config import LedgerConfig, EngineDesign, StateBackend, get_ledger_config

# Consent management
from .consent import (
    ConsentAction, ConsentScope, AccessRequest, UpdateRequest, UpdateResult,
    GrantRecord, RevokeTombstone,
    build_scope_key, build_tombstone_key,
    StateStore, SQLStateStore, InMemoryStateStore,
    ConsentEngine, MembershipRecordEngine, TombstoneOverlayEngine,
    get_consent_engine, check_access, update_consent,
)

# Rich queries
from .query import QueryGateway, encode_query_results, run_query

# Invocation surface
from .dispatch import ConsentLedger, InvocationResponse, get_ledger

# Errors
from .exceptions import (
    LedgerError, InvalidArgumentError, UnknownFunctionError,
    StoreUnavailableError, WriteConflictError, DecodeFailureError,
    ConsentNotFoundError, QueryFailedError,
)

__all__ = [
    # Config
    "LedgerConfig",
    "EngineDesign",
    "StateBackend",
    "get_ledger_config",

    # Consent
    "ConsentAction",
    "ConsentScope",
    "AccessRequest",
    "UpdateRequest",
    "UpdateResult",
    "GrantRecord",
    "RevokeTombstone",
    "build_scope_key",
    "build_tombstone_key",
    "StateStore",
    "SQLStateStore",
    "InMemoryStateStore",
    "ConsentEngine",
    "MembershipRecordEngine",
    "TombstoneOverlayEngine",
    "get_consent_engine",
    "check_access",
    "update_consent",

    # Query
    "QueryGateway",
    "encode_query_results",
    "run_query",

    # Dispatch
    "ConsentLedger",
    "InvocationResponse",
    "get_ledger",

    # Errors
    "LedgerError",
    "InvalidArgumentError",
    "UnknownFunctionError",
    "StoreUnavailableError",
    "WriteConflictError",
    "DecodeFailureError",
    "ConsentNotFoundError",
    "QueryFailedError",
]
