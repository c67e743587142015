"""
Tests for consent engine selection and module-level shortcuts
"""

import pytest

from consent_ledger.config import EngineDesign
from consent_ledger.consent import engine as engine_module
from consent_ledger.consent import storage as storage_module
from consent_ledger.consent.engine import (
    create_consent_engine, get_consent_engine, check_access, update_consent,
)
from consent_ledger.consent.membership import MembershipRecordEngine
from consent_ledger.consent.models import AccessRequest, UpdateRequest, ConsentAction
from consent_ledger.consent.storage import InMemoryStateStore
from consent_ledger.consent.tombstone import TombstoneOverlayEngine
from consent_ledger.exceptions import ConsentNotFoundError

SCOPE_ARGS = {
    "role_id": "r1",
    "start_date": "2024-01-01",
    "end_date": "2024-12-31",
    "column_ids": ["colA"],
    "access_type": "read",
    "watchdog_id": "w1",
}


@pytest.fixture
def memory_store(monkeypatch: pytest.MonkeyPatch) -> InMemoryStateStore:
    store = InMemoryStateStore()
    monkeypatch.setattr(storage_module, "_state_store", store)
    monkeypatch.setattr(engine_module, "_consent_engines", {})
    return store


class TestEngineSelection:
    """Test design-to-engine mapping"""

    def test_create_by_design(self):
        """Each design builds its own engine over the given store"""
        store = InMemoryStateStore()

        membership = create_consent_engine(EngineDesign.MEMBERSHIP, store)
        tombstone = create_consent_engine(EngineDesign.TOMBSTONE, store)

        assert isinstance(membership, MembershipRecordEngine)
        assert isinstance(tombstone, TombstoneOverlayEngine)
        assert membership.store is store

    def test_create_from_string(self):
        """Design names are accepted as plain strings"""
        engine = create_consent_engine("membership", InMemoryStateStore())

        assert isinstance(engine, MembershipRecordEngine)

    def test_global_engine_cached(self, memory_store):
        """The global engine for a design is built once"""
        first = get_consent_engine(EngineDesign.TOMBSTONE)

        assert get_consent_engine(EngineDesign.TOMBSTONE) is first
        assert first.store is memory_store

    def test_shortcuts(self, memory_store):
        """Module-level shortcuts run against the global engine"""
        update_consent(
            UpdateRequest(user_id="alice", action=ConsentAction.GRANT, **SCOPE_ARGS),
            design=EngineDesign.MEMBERSHIP,
        )

        result = check_access(AccessRequest(**SCOPE_ARGS), design=EngineDesign.MEMBERSHIP)
        assert list(result.values()) == [["alice"]]

        update_consent(
            UpdateRequest(user_id="alice", action=ConsentAction.REVOKE, **SCOPE_ARGS),
            design=EngineDesign.MEMBERSHIP,
        )
        with pytest.raises(ConsentNotFoundError):
            check_access(AccessRequest(**SCOPE_ARGS), design=EngineDesign.MEMBERSHIP)
        assert memory_store.state == {}
