"""
Argument Validators for the Consent Ledger

Validates positional string arguments of ledger invocations and builds the
typed requests the consent engines operate on. Every check here runs before
any state store access.
"""

import logging
from typing import Any, List, Sequence, Tuple

from pydantic import ValidationError

from ..constants import (
    CHECK_ACCESS_ARGS,
    UPDATE_CONSENT_ARGS,
    COLUMN_ID_SEPARATOR,
    KEY_DELIMITER,
)
from ..consent.models import AccessRequest, UpdateRequest, ConsentAction
from ..exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)

_ORDINALS = ("1st", "2nd", "3rd")


def _ordinal(position: int) -> str:
    if position <= len(_ORDINALS):
        return _ORDINALS[position - 1]
    return f"{position}th"


# =============================================================================
# VALIDATION FUNCTIONS
# =============================================================================

def validate_arity(
    args: Sequence[Any],
    expected: Tuple[str, ...],
    function: str
) -> None:
    """
    Validate the number of positional arguments.

    Args:
        args: Positional arguments received
        expected: Names of the expected arguments, in order
        function: Invoked function name for error messages

    Raises:
        InvalidArgumentError: If the count does not match
    """
    if len(args) != len(expected):
        raise InvalidArgumentError(
            f"Incorrect number of arguments. Expecting {len(expected)}",
            details={
                "function": function,
                "expected": list(expected),
                "received": len(args),
            },
        )


def validate_required(
    value: Any,
    field_name: str,
    position: int
) -> str:
    """
    Validate that a positional argument is a non-empty string.

    Args:
        value: Argument value
        field_name: Field name for error details
        position: 1-based argument position for the message

    Returns:
        The stripped argument

    Raises:
        InvalidArgumentError: If the value is missing, empty or not a string
    """
    if not isinstance(value, str) or not value.strip():
        raise InvalidArgumentError(
            f"{_ordinal(position)} argument must be a non-empty string",
            field=field_name,
        )

    if KEY_DELIMITER in value:
        raise InvalidArgumentError(
            f"{_ordinal(position)} argument contains a reserved character",
            field=field_name,
        )

    return value.strip()


def split_column_ids(value: str, field_name: str = "column_ids") -> List[str]:
    """
    Split a comma-separated column id argument.

    Surrounding whitespace is stripped from each id.

    Raises:
        InvalidArgumentError: If any id in the list is empty
    """
    column_ids = [column_id.strip() for column_id in value.split(COLUMN_ID_SEPARATOR)]
    if not all(column_ids):
        raise InvalidArgumentError(
            "Column ids must be non-empty",
            field=field_name,
            details={"value": value},
        )
    return column_ids


def _validated_fields(args: Sequence[Any], names: Tuple[str, ...],
                      function: str) -> dict:
    validate_arity(args, names, function)
    fields = {
        name: validate_required(value, name, position)
        for position, (name, value) in enumerate(zip(names, args), start=1)
    }
    fields["column_ids"] = split_column_ids(fields["column_ids"])
    return fields


def parse_access_args(args: Sequence[Any], function: str) -> AccessRequest:
    """
    Build an access check request from positional arguments.

    Order: role, start date, end date, column ids (csv), access type, watchdog.

    Raises:
        InvalidArgumentError: If any argument is invalid
    """
    fields = _validated_fields(args, CHECK_ACCESS_ARGS, function)
    try:
        return AccessRequest(**fields)
    except ValidationError as e:
        logger.debug("Rejected access arguments for %s: %s", function, e)
        raise InvalidArgumentError(f"Invalid arguments for {function}",
                                   details={"reason": str(e)}) from e


def parse_update_args(args: Sequence[Any], function: str) -> UpdateRequest:
    """
    Build a consent update request from positional arguments.

    Order: user, action (g/r), role, start date, end date, column ids (csv),
    access type, watchdog.

    Raises:
        InvalidArgumentError: If any argument is invalid
    """
    fields = _validated_fields(args, UPDATE_CONSENT_ARGS, function)
    fields["action"] = ConsentAction.parse(fields["action"])
    try:
        return UpdateRequest(**fields)
    except ValidationError as e:
        logger.debug("Rejected update arguments for %s: %s", function, e)
        raise InvalidArgumentError(f"Invalid arguments for {function}",
                                   details={"reason": str(e)}) from e
