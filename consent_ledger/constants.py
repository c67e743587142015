"""
Constants for the Consent Ledger

Centralized identifiers for invocation functions, consent actions,
record discriminators and storage key layout.
"""

from typing import Final, Tuple, Dict

# =============================================================================
# SERVICE IDENTIFICATION
# =============================================================================

SERVICE_NAME: Final[str] = "consent-ledger"
SERVICE_VERSION: Final[str] = "0.1.0"

# =============================================================================
# STORAGE KEY LAYOUT
# =============================================================================

KEY_DELIMITER: Final[str] = "\x00"
KEY_VERSION: Final[str] = "v1"

GRANT_NAMESPACE: Final[str] = "consent_grant"
REVOKE_NAMESPACE: Final[str] = "consent_revoke"

# Presence marker stored against each member of a grant record
MEMBER_PRESENT: Final[int] = 1

# =============================================================================
# CONSENT ACTIONS
# =============================================================================

class ConsentActions:
    """Accepted spellings of the update action argument"""
    GRANT: Final[Tuple[str, ...]] = ("g", "grant")
    REVOKE: Final[Tuple[str, ...]] = ("r", "revoke")


# =============================================================================
# INVOCATION FUNCTIONS
# =============================================================================

class Functions:
    """Invocation function names accepted by the dispatcher"""
    CHECK_ACCESS: Final[str] = "checkAccess"
    UPDATE_CONSENT: Final[str] = "updateConsent"
    CHECK_ACCESS_MEMBERSHIP: Final[str] = "checkAccessMembership"
    UPDATE_CONSENT_MEMBERSHIP: Final[str] = "updateConsentMembership"
    CHECK_ACCESS_TOMBSTONE: Final[str] = "checkAccessTombstone"
    UPDATE_CONSENT_TOMBSTONE: Final[str] = "updateConsentTombstone"
    RUN_QUERY: Final[str] = "runQuery"

    # Names used by earlier deployments of the ledger. accessConsent pairs
    # with updateConsent, so both follow the configured design.
    LEGACY_ALIASES: Final[Dict[str, str]] = {
        "accessConsent": CHECK_ACCESS,
        "accessConsentNewDesign": CHECK_ACCESS_TOMBSTONE,
        "updateConsentNewDesign": UPDATE_CONSENT_TOMBSTONE,
        "queryMarbles": RUN_QUERY,
    }


# Positional argument layouts
CHECK_ACCESS_ARGS: Final[Tuple[str, ...]] = (
    "role_id", "start_date", "end_date", "column_ids", "access_type", "watchdog_id",
)
UPDATE_CONSENT_ARGS: Final[Tuple[str, ...]] = (
    "user_id", "action", "role_id", "start_date", "end_date",
    "column_ids", "access_type", "watchdog_id",
)
RUN_QUERY_ARGS: Final[Tuple[str, ...]] = ("query",)

COLUMN_ID_SEPARATOR: Final[str] = ","

# =============================================================================
# RESPONSE STATUS
# =============================================================================

STATUS_OK: Final[int] = 200
STATUS_ERROR: Final[int] = 500

# HTTP status for each error code on the host surface
ERROR_HTTP_STATUS: Final[Dict[str, int]] = {
    "INVALID_ARGUMENT": 400,
    "UNKNOWN_FUNCTION": 404,
    "CONSENT_NOT_FOUND": 404,
    "DECODE_FAILURE": 500,
    "STORE_UNAVAILABLE": 503,
    "WRITE_CONFLICT": 409,
    "QUERY_FAILED": 502,
}
