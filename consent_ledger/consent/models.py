"""
Consent data models for the ledger
Scope, grant record and revoke tombstone structures persisted in the state store
"""

from enum import Enum
from typing import List, Dict, Literal
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..constants import ConsentActions, MEMBER_PRESENT
from ..exceptions import DecodeFailureError, InvalidArgumentError


def _normalize(value: str) -> str:
    value = value.strip().lower()
    if not value:
        raise ValueError("must be a non-empty string")
    return value


class ConsentAction(str, Enum):
    """Consent update actions"""
    GRANT = "grant"
    REVOKE = "revoke"

    @classmethod
    def parse(cls, value: str) -> "ConsentAction":
        """Parse an action argument (``g``/``grant`` or ``r``/``revoke``)"""
        normalized = value.strip().lower()
        if normalized in ConsentActions.GRANT:
            return cls.GRANT
        if normalized in ConsentActions.REVOKE:
            return cls.REVOKE
        raise InvalidArgumentError(
            f"Unknown consent action {value!r}, expected one of g, grant, r, revoke",
            field="action",
        )


class ConsentScope(BaseModel):
    """The six attributes identifying one access-control unit"""
    model_config = ConfigDict(frozen=True)

    column_id: str = Field(..., description="Data column identifier")
    role_id: str = Field(..., description="Requesting role identifier")
    start_date: str = Field(..., description="Start of the access window")
    end_date: str = Field(..., description="End of the access window")
    access_type: str = Field(..., description="Kind of access, e.g. read")
    watchdog_id: str = Field(..., description="Watchdog/auditor identifier")

    @field_validator("*")
    @classmethod
    def _normalize_attribute(cls, value: str) -> str:
        return _normalize(value)


class AccessRequest(BaseModel):
    """Arguments of an access check spanning one or more columns"""
    role_id: str
    start_date: str
    end_date: str
    column_ids: List[str] = Field(..., min_length=1)
    access_type: str
    watchdog_id: str

    @field_validator("role_id", "start_date", "end_date", "access_type", "watchdog_id")
    @classmethod
    def _normalize_attribute(cls, value: str) -> str:
        return _normalize(value)

    @field_validator("column_ids")
    @classmethod
    def _normalize_columns(cls, value: List[str]) -> List[str]:
        return [_normalize(column_id) for column_id in value]

    def scopes(self) -> List[ConsentScope]:
        """One scope per requested column, in request order"""
        return [
            ConsentScope(
                column_id=column_id,
                role_id=self.role_id,
                start_date=self.start_date,
                end_date=self.end_date,
                access_type=self.access_type,
                watchdog_id=self.watchdog_id,
            )
            for column_id in self.column_ids
        ]


class UpdateRequest(AccessRequest):
    """Arguments of a grant or revoke spanning one or more columns"""
    user_id: str
    action: ConsentAction

    @field_validator("user_id")
    @classmethod
    def _normalize_user(cls, value: str) -> str:
        return _normalize(value)


class UpdateResult(BaseModel):
    """Keys touched by an update, in the order they were written"""
    design: str
    action: ConsentAction
    user_id: str
    written: List[str] = Field(default_factory=list)
    deleted: List[str] = Field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.written or self.deleted)


class ScopedRecord(BaseModel):
    """Base for records that echo their scope attributes"""
    column_id: str
    role_id: str
    start_date: str
    end_date: str
    access_type: str
    watchdog_id: str

    def scope(self) -> ConsentScope:
        return ConsentScope(
            column_id=self.column_id,
            role_id=self.role_id,
            start_date=self.start_date,
            end_date=self.end_date,
            access_type=self.access_type,
            watchdog_id=self.watchdog_id,
        )

    def to_bytes(self) -> bytes:
        return self.model_dump_json().encode("utf-8")

    @classmethod
    def from_bytes(cls, key: str, raw: bytes):
        """Decode a stored value, raising DecodeFailureError on any mismatch"""
        try:
            return cls.model_validate_json(raw)
        except ValidationError as e:
            raise DecodeFailureError(key, expected=cls.__name__, reason=str(e)) from e


class GrantRecord(ScopedRecord):
    """Members holding consent for one scope"""
    doc_type: Literal["consent_grant"] = "consent_grant"
    scope_key: str
    members: Dict[str, int] = Field(default_factory=dict)

    @classmethod
    def for_scope(cls, scope_key: str, scope: ConsentScope) -> "GrantRecord":
        return cls(scope_key=scope_key, **scope.model_dump())

    def has_member(self, user_id: str) -> bool:
        return self.members.get(user_id, 0) > 0

    def add_member(self, user_id: str) -> bool:
        """Add a member, returning False if already present"""
        if self.has_member(user_id):
            return False
        self.members[user_id] = MEMBER_PRESENT
        return True

    def remove_member(self, user_id: str) -> bool:
        """Remove a member, returning False if not present"""
        if not self.has_member(user_id):
            return False
        del self.members[user_id]
        return True

    def active_members(self) -> List[str]:
        return sorted(user_id for user_id, marker in self.members.items() if marker > 0)


class RevokeTombstone(ScopedRecord):
    """Marker recording that a user's consent for a scope is revoked"""
    doc_type: Literal["consent_revoke"] = "consent_revoke"
    tombstone_key: str
    user_id: str

    @classmethod
    def for_user(cls, tombstone_key: str, user_id: str,
                 scope: ConsentScope) -> "RevokeTombstone":
        return cls(tombstone_key=tombstone_key, user_id=user_id, **scope.model_dump())
