"""
Tombstone overlay consent engine

Grants append to a shared per-scope grant record that revokes never touch.
A revoke instead writes a tombstone keyed by (user, scope), and access checks
drop any member that has one. A later grant for the same user clears the
tombstone.
"""

from typing import Dict, List
import structlog

from .base import ConsentEngine
from .keys import build_scope_key, build_tombstone_key
from .models import (
    AccessRequest, UpdateRequest, UpdateResult, GrantRecord, RevokeTombstone,
    ConsentAction, ConsentScope,
)
from ..config import EngineDesign
from ..exceptions import ConsentNotFoundError

logger = structlog.get_logger(__name__)


class TombstoneOverlayEngine(ConsentEngine):
    """Consent engine resolving revokes through per-user tombstones"""

    design = EngineDesign.TOMBSTONE

    def check_access(self, request: AccessRequest) -> Dict[str, List[str]]:
        result: Dict[str, List[str]] = {}

        for scope in request.scopes():
            scope_key = build_scope_key(scope)
            record = self._read_grant(scope_key)
            if record is None:
                continue

            members = [
                user_id for user_id in record.active_members()
                if not self._is_revoked(user_id, scope)
            ]
            if members:
                result[scope_key] = members

        if not result:
            logger.info("Consent not found", design=self.design.value,
                        column_ids=request.column_ids, role_id=request.role_id)
            raise ConsentNotFoundError(request.column_ids, self.design.value)

        logger.info("Consent check passed", design=self.design.value,
                    scopes=len(result), role_id=request.role_id)
        return result

    def update_consent(self, request: UpdateRequest) -> UpdateResult:
        if request.action == ConsentAction.GRANT:
            return self._grant(request)
        return self._revoke(request)

    def _is_revoked(self, user_id: str, scope: ConsentScope) -> bool:
        return self.store.get(build_tombstone_key(user_id, scope)) is not None

    def _grant(self, request: UpdateRequest) -> UpdateResult:
        result = self._new_result(request)

        for scope in request.scopes():
            scope_key = build_scope_key(scope)
            record = self._read_grant(scope_key)

            if record is None:
                record = GrantRecord.for_scope(scope_key, scope)
                record.add_member(request.user_id)
                modified = True
            else:
                modified = record.add_member(request.user_id)

            # A grant always wins over a stale revoke marker
            tombstone_key = build_tombstone_key(request.user_id, scope)
            if self.store.get(tombstone_key) is not None:
                self.store.delete(tombstone_key)
                result.deleted.append(tombstone_key)
                logger.info("Cleared revoke tombstone", tombstone_key=tombstone_key,
                            user_id=request.user_id)

            if modified:
                self.store.put(scope_key, record.to_bytes())
                result.written.append(scope_key)
                logger.info("Granted consent", scope_key=scope_key,
                            user_id=request.user_id)

        return result

    def _revoke(self, request: UpdateRequest) -> UpdateResult:
        result = self._new_result(request)

        for scope in request.scopes():
            tombstone_key = build_tombstone_key(request.user_id, scope)
            if self.store.get(tombstone_key) is not None:
                continue

            tombstone = RevokeTombstone.for_user(tombstone_key, request.user_id, scope)
            self.store.put(tombstone_key, tombstone.to_bytes())
            result.written.append(tombstone_key)
            logger.info("Wrote revoke tombstone", tombstone_key=tombstone_key,
                        user_id=request.user_id)

        return result
