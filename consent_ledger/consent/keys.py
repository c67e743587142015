"""
Storage key encoding for consent records

Grant and revoke keys share one canonical field order:
column, role, start date, end date, access type, watchdog.
"""

from typing import Iterable

from .models import ConsentScope
from ..constants import KEY_DELIMITER, KEY_VERSION, GRANT_NAMESPACE, REVOKE_NAMESPACE
from ..exceptions import InvalidArgumentError


def _scope_fields(scope: ConsentScope) -> tuple:
    return (
        scope.column_id,
        scope.role_id,
        scope.start_date,
        scope.end_date,
        scope.access_type,
        scope.watchdog_id,
    )


def _encode(namespace: str, fields: Iterable[str]) -> str:
    parts = [namespace, KEY_VERSION]
    for value in fields:
        if KEY_DELIMITER in value:
            raise InvalidArgumentError(
                "Key attributes must not contain the key delimiter",
                details={"value": value},
            )
        parts.append(value.lower())
    return KEY_DELIMITER.join(parts)


def build_scope_key(scope: ConsentScope) -> str:
    """Key of the grant record for a scope"""
    return _encode(GRANT_NAMESPACE, _scope_fields(scope))


def build_tombstone_key(user_id: str, scope: ConsentScope) -> str:
    """Key of the revoke tombstone for a user within a scope"""
    return _encode(REVOKE_NAMESPACE, (user_id, *_scope_fields(scope)))
