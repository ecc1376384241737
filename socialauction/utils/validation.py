"""
Input Validation - Sanitization of values entering the auction core.

Provides validation for all external inputs to prevent:
- Malformed identities
- Integer overflows beyond the unsigned 256-bit range
- Zero or negative prices and quantities
"""

from typing import Any, Tuple, Optional

# =============================================================================
# Constants
# =============================================================================

MAX_ADDRESS_SIZE = 20

# Unsigned integer bounds (uint256)
MIN_AMOUNT = 0
MAX_AMOUNT = 2**256 - 1
MIN_TIMESTAMP = 0
MAX_TIMESTAMP = 2**64 - 1


# =============================================================================
# Validation Functions
# =============================================================================


def validate_bytes(
    data: Any,
    name: str,
    expected_length: Optional[int] = None,
    max_length: Optional[int] = None,
) -> Tuple[bool, str]:
    """
    Validate bytes input.

    Args:
        data: Data to validate
        name: Field name for error messages
        expected_length: Exact expected length
        max_length: Maximum allowed length

    Returns:
        (is_valid, error_message)
    """
    if not isinstance(data, (bytes, bytearray)):
        return False, f"{name} must be bytes, got {type(data).__name__}"

    if expected_length is not None and len(data) != expected_length:
        return False, f"{name} must be {expected_length} bytes, got {len(data)}"

    if max_length is not None and len(data) > max_length:
        return False, f"{name} exceeds max length {max_length}, got {len(data)}"

    return True, ""


def validate_address(address: Any, name: str = "address") -> Tuple[bool, str]:
    """Validate an address."""
    return validate_bytes(address, name, expected_length=MAX_ADDRESS_SIZE)


def validate_integer(
    value: Any,
    name: str,
    min_val: int = MIN_AMOUNT,
    max_val: int = MAX_AMOUNT,
) -> Tuple[bool, str]:
    """
    Validate integer within bounds.

    Args:
        value: Value to validate
        name: Field name for errors
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        (is_valid, error_message)
    """
    # bool is an int subclass but never a valid amount
    if isinstance(value, bool) or not isinstance(value, int):
        return False, f"{name} must be int, got {type(value).__name__}"

    if value < min_val:
        return False, f"{name} must be >= {min_val}, got {value}"

    if value > max_val:
        return False, f"{name} must be <= {max_val}, got {value}"

    return True, ""


def validate_amount(amount: Any, name: str = "amount") -> Tuple[bool, str]:
    """Validate an unsigned amount (zero allowed)."""
    return validate_integer(amount, name, MIN_AMOUNT, MAX_AMOUNT)


def validate_positive_amount(amount: Any, name: str = "amount") -> Tuple[bool, str]:
    """Validate an unsigned amount that must be at least 1."""
    return validate_integer(amount, name, 1, MAX_AMOUNT)


def validate_timestamp(timestamp: Any, name: str = "timestamp") -> Tuple[bool, str]:
    """Validate a Unix timestamp in seconds."""
    return validate_integer(timestamp, name, MIN_TIMESTAMP, MAX_TIMESTAMP)


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    "validate_bytes",
    "validate_address",
    "validate_integer",
    "validate_amount",
    "validate_positive_amount",
    "validate_timestamp",
    "MAX_ADDRESS_SIZE",
    "MAX_AMOUNT",
]
