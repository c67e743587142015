"""
Consent management module for the ledger
Scoped grant/revoke records under two storage designs
"""

from .models import (
    ConsentAction, ConsentScope, AccessRequest, UpdateRequest, UpdateResult,
    GrantRecord, RevokeTombstone,
)
from .keys import build_scope_key, build_tombstone_key
from .storage import (
    StateStore, SQLStateStore, InMemoryStateStore, ResultsIterator, QueryResult,
    get_state_store,
)
from .base import ConsentEngine
from .membership import MembershipRecordEngine
from .tombstone import TombstoneOverlayEngine
from .engine import create_consent_engine, get_consent_engine, check_access, update_consent

__all__ = [
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
    "ResultsIterator",
    "QueryResult",
    "get_state_store",
    "ConsentEngine",
    "MembershipRecordEngine",
    "TombstoneOverlayEngine",
    "create_consent_engine",
    "get_consent_engine",
    "check_access",
    "update_consent",
]
