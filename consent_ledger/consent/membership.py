"""
Membership record consent engine

Each scope owns a single grant record listing its members. Grants and revokes
rewrite that record in place, and a record whose last member is revoked is
deleted so that an existing key always means at least one member.
"""

from typing import Dict, List
import structlog

from .base import ConsentEngine
from .keys import build_scope_key
from .models import AccessRequest, UpdateRequest, UpdateResult, GrantRecord, ConsentAction
from ..config import EngineDesign
from ..exceptions import ConsentNotFoundError

logger = structlog.get_logger(__name__)


class MembershipRecordEngine(ConsentEngine):
    """Consent engine keeping one mutable membership record per scope"""

    design = EngineDesign.MEMBERSHIP

    def check_access(self, request: AccessRequest) -> Dict[str, List[str]]:
        result: Dict[str, List[str]] = {}

        for scope in request.scopes():
            scope_key = build_scope_key(scope)
            record = self._read_grant(scope_key)
            if record is None:
                continue

            members = record.active_members()
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
        result = self._new_result(request)

        for scope in request.scopes():
            scope_key = build_scope_key(scope)
            record = self._read_grant(scope_key)

            if record is None:
                if request.action == ConsentAction.GRANT:
                    record = GrantRecord.for_scope(scope_key, scope)
                    record.add_member(request.user_id)
                    self.store.put(scope_key, record.to_bytes())
                    result.written.append(scope_key)
                    logger.info("Created grant record", scope_key=scope_key,
                                user_id=request.user_id)
                # Nothing to revoke for a scope without a record
                continue

            if request.action == ConsentAction.GRANT:
                if record.add_member(request.user_id):
                    self.store.put(scope_key, record.to_bytes())
                    result.written.append(scope_key)
                    logger.info("Granted consent", scope_key=scope_key,
                                user_id=request.user_id)
                continue

            if not record.remove_member(request.user_id):
                continue

            if record.active_members():
                self.store.put(scope_key, record.to_bytes())
                result.written.append(scope_key)
                logger.info("Revoked consent", scope_key=scope_key,
                            user_id=request.user_id)
            else:
                self.store.delete(scope_key)
                result.deleted.append(scope_key)
                logger.info("Revoked last member, deleted grant record",
                            scope_key=scope_key, user_id=request.user_id)

        return result
