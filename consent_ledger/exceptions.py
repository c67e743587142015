"""
Custom Exceptions for the Consent Ledger

Provides a unified exception hierarchy for argument validation, state store
access, record decoding, consent lookups and invocation dispatch.
"""

from typing import Optional, Dict, Any, List


class LedgerError(Exception):
    """
    Base exception for all consent ledger errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code
        details: Additional context about the error
    """

    def __init__(
        self,
        message: str,
        error_code: str = "LEDGER_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses"""
        result: Dict[str, Any] = {
            "error": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# ARGUMENT ERRORS
# =============================================================================

class InvalidArgumentError(LedgerError):
    """Raised when an invocation has the wrong arity or an empty required field"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, "INVALID_ARGUMENT", details)


class UnknownFunctionError(LedgerError):
    """Raised when the dispatcher receives an unknown function name"""

    def __init__(
        self,
        function: str,
        known_functions: Optional[List[str]] = None
    ):
        details: Dict[str, Any] = {"function": function}
        if known_functions:
            details["known_functions"] = known_functions
        super().__init__(
            message=f"Received unknown function invocation: {function}",
            error_code="UNKNOWN_FUNCTION",
            details=details
        )


# =============================================================================
# STATE STORE ERRORS
# =============================================================================

class StoreUnavailableError(LedgerError):
    """Raised when a get/put/delete against the state store fails"""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        operation: Optional[str] = None,
        reason: Optional[str] = None,
        error_code: str = "STORE_UNAVAILABLE"
    ):
        details: Dict[str, Any] = {}
        if key is not None:
            details["key"] = key
        if operation:
            details["operation"] = operation
        if reason:
            details["reason"] = reason
        super().__init__(message, error_code, details)


class WriteConflictError(StoreUnavailableError):
    """Raised when the store rejects a write that raced another invocation"""

    def __init__(
        self,
        key: str,
        reason: Optional[str] = None
    ):
        super().__init__(
            message=f"Conflicting write rejected for key: {key!r}",
            key=key,
            operation="put",
            reason=reason,
            error_code="WRITE_CONFLICT"
        )


class DecodeFailureError(LedgerError):
    """Raised when stored bytes do not parse as the expected record shape"""

    def __init__(
        self,
        key: str,
        expected: str,
        reason: Optional[str] = None
    ):
        details: Dict[str, Any] = {"key": key, "expected": expected}
        if reason:
            details["reason"] = reason
        super().__init__(
            message=f"Failed to decode {expected} stored under key {key!r}",
            error_code="DECODE_FAILURE",
            details=details
        )


# =============================================================================
# CONSENT ERRORS
# =============================================================================

class ConsentNotFoundError(LedgerError):
    """Raised when a well-formed access check finds no qualifying consent"""

    def __init__(
        self,
        column_ids: Optional[List[str]] = None,
        design: Optional[str] = None
    ):
        details: Dict[str, Any] = {}
        if column_ids:
            details["column_ids"] = column_ids
        if design:
            details["design"] = design
        super().__init__(
            message="Consent not found",
            error_code="CONSENT_NOT_FOUND",
            details=details
        )


# =============================================================================
# QUERY ERRORS
# =============================================================================

class QueryFailedError(LedgerError):
    """Raised when a rich-query cursor cannot be obtained or advanced"""

    def __init__(
        self,
        message: str = "Rich query failed",
        reason: Optional[str] = None
    ):
        details: Dict[str, Any] = {}
        if reason:
            details["reason"] = reason
        super().__init__(message, "QUERY_FAILED", details)
