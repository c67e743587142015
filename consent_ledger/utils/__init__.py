"""
Utility functions for the consent ledger
Invocation argument validation helpers
"""

from .validators import (
    validate_arity,
    validate_required,
    split_column_ids,
    parse_access_args,
    parse_update_args,
)

__all__ = [
    "validate_arity",
    "validate_required",
    "split_column_ids",
    "parse_access_args",
    "parse_update_args",
]
