"""
Tests for ledger invocation dispatch
"""

import json
from typing import List, Optional

import pytest

from consent_ledger.config import EngineDesign
from consent_ledger.constants import REVOKE_NAMESPACE, STATUS_ERROR, STATUS_OK
from consent_ledger.consent.keys import build_scope_key
from consent_ledger.consent.models import ConsentScope
from consent_ledger.consent.storage import InMemoryStateStore
from consent_ledger.dispatch import ConsentLedger

SCOPE = ["r1", "2024-01-01", "2024-12-31"]
TAIL = ["read", "w1"]


def check_args(columns: str) -> List[str]:
    return [*SCOPE, columns, *TAIL]


def update_args(user: str, action: str, columns: str) -> List[str]:
    return [user, action, *SCOPE, columns, *TAIL]


def scope_key(column_id: str) -> str:
    return build_scope_key(ConsentScope(
        column_id=column_id, role_id="r1", start_date="2024-01-01",
        end_date="2024-12-31", access_type="read", watchdog_id="w1",
    ))


class RecordingStore(InMemoryStateStore):
    """In-memory store that records every access"""

    def __init__(self):
        super().__init__()
        self.calls: List[str] = []

    def get(self, key: str) -> Optional[bytes]:
        self.calls.append("get")
        return super().get(key)

    def put(self, key: str, value: bytes) -> None:
        self.calls.append("put")
        super().put(key, value)

    def delete(self, key: str) -> None:
        self.calls.append("delete")
        super().delete(key)


class TestConsentLedger:
    """Test the invocation surface"""

    def setup_method(self):
        """Setup test environment"""
        self.store = RecordingStore()
        self.ledger = ConsentLedger(self.store)

    def test_unknown_function(self):
        """Unknown names fail with UNKNOWN_FUNCTION"""
        response = self.ledger.invoke("initMarble", ["m1"])

        assert response.status == STATUS_ERROR
        assert response.error_code == "UNKNOWN_FUNCTION"
        assert not response.ok

    @pytest.mark.parametrize("function,args", [
        ("checkAccessMembership", SCOPE),
        ("updateConsentTombstone", ["alice", "g", *SCOPE]),
        ("runQuery", []),
    ])
    def test_wrong_arity(self, function, args):
        """Wrong argument counts are rejected before any store access"""
        response = self.ledger.invoke(function, args)

        assert response.error_code == "INVALID_ARGUMENT"
        assert "Incorrect number of arguments" in response.message
        assert self.store.calls == []

    def test_empty_argument(self):
        """Every positional argument must be non-empty"""
        args = update_args("alice", "g", "colA")
        args[-1] = ""

        response = self.ledger.invoke("updateConsentMembership", args)

        assert response.error_code == "INVALID_ARGUMENT"
        assert response.message == "8th argument must be a non-empty string"
        assert self.store.calls == []

    def test_empty_column_id(self):
        """Blank entries in the column list are rejected"""
        response = self.ledger.invoke("checkAccessTombstone", check_args("colA,,colB"))

        assert response.error_code == "INVALID_ARGUMENT"
        assert self.store.calls == []

    def test_unknown_action(self):
        """Actions other than grant/revoke are rejected"""
        response = self.ledger.invoke("updateConsentMembership", update_args("alice", "x", "colA"))

        assert response.error_code == "INVALID_ARGUMENT"
        assert self.store.calls == []

    def test_membership_grant_and_check(self):
        """Grant then check returns the scope mapping as payload"""
        granted = self.ledger.invoke("updateConsentMembership",
                                     update_args("Alice", "G", "colA, colB"))
        checked = self.ledger.invoke("checkAccessMembership", check_args("colA,colB"))

        assert granted.status == STATUS_OK
        assert json.loads(granted.payload)["written"] == [scope_key("cola"), scope_key("colb")]
        assert json.loads(checked.payload) == {
            scope_key("cola"): ["alice"],
            scope_key("colb"): ["alice"],
        }

    def test_consent_not_found(self):
        """Checks without qualifying users fail with CONSENT_NOT_FOUND"""
        response = self.ledger.invoke("checkAccessTombstone", check_args("c1,c2"))

        assert response.error_code == "CONSENT_NOT_FOUND"
        assert response.message == "Consent not found"

    def test_tombstone_revoke_and_check(self):
        """Tombstone revokes hide the user from tombstone checks"""
        self.ledger.invoke("updateConsentTombstone", update_args("alice", "grant", "colA,colB"))
        self.ledger.invoke("updateConsentTombstone", update_args("alice", "revoke", "colA"))

        response = self.ledger.invoke("checkAccessTombstone", check_args("colA,colB"))

        assert json.loads(response.payload) == {scope_key("colb"): ["alice"]}

    def test_legacy_aliases(self):
        """Function names from earlier deployments still route"""
        self.ledger.invoke("updateConsentNewDesign", update_args("alice", "g", "colA"))

        assert self.ledger.invoke("accessConsentNewDesign", check_args("colA")).ok

        response = self.ledger.invoke("queryMarbles", ['{"selector":{"doc_type":"consent_grant"}}'])
        assert response.ok
        assert [row["Key"] for row in json.loads(response.payload)] == [scope_key("cola")]

    @pytest.mark.parametrize("design", list(EngineDesign))
    def test_legacy_revoke_removes_access(self, monkeypatch, design):
        """updateConsent and accessConsent read and write the same design"""
        monkeypatch.setattr(self.ledger.config, "engine_design", design)

        self.ledger.invoke("updateConsent", update_args("alice", "g", "colA"))
        assert self.ledger.invoke("accessConsent", check_args("colA")).ok

        self.ledger.invoke("updateConsent", update_args("alice", "r", "colA"))
        response = self.ledger.invoke("accessConsent", check_args("colA"))

        assert response.error_code == "CONSENT_NOT_FOUND"

    def test_default_design(self, monkeypatch):
        """checkAccess/updateConsent follow the configured design"""
        monkeypatch.setattr(self.ledger.config, "engine_design", EngineDesign.TOMBSTONE)

        self.ledger.invoke("updateConsent", update_args("alice", "r", "colA"))

        assert any(key.startswith(REVOKE_NAMESPACE) for key in self.store.state)

        monkeypatch.setattr(self.ledger.config, "engine_design", EngineDesign.MEMBERSHIP)
        self.ledger.invoke("updateConsent", update_args("bob", "g", "colA"))

        assert self.ledger.invoke("checkAccess", check_args("colA")).ok

    def test_run_query(self):
        """runQuery returns the encoded result array"""
        self.ledger.invoke("updateConsentMembership", update_args("alice", "g", "colA"))

        response = self.ledger.invoke("runQuery", ['{"selector":{"doc_type":"consent_grant"}}'])

        rows = json.loads(response.payload)
        assert [row["Key"] for row in rows] == [scope_key("cola")]
        assert rows[0]["Record"]["members"] == {"alice": 1}

    def test_decode_failure_surfaces(self):
        """Corrupt records become error responses"""
        ledger = ConsentLedger(InMemoryStateStore())
        ledger.store.state[scope_key("cola")] = b"garbage"

        response = ledger.invoke("checkAccessMembership", check_args("colA"))

        assert response.error_code == "DECODE_FAILURE"
