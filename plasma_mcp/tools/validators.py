"""Shared validation helpers for Plasma MCP tools.

The ``is_*`` helpers answer format questions; the ``require_*`` helpers raise
``ValidationError`` naming the offending field and the violated rule.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Optional

from plasma_mcp.codec import ADDRESS_REGEX, DECIMAL_AMOUNT_REGEX
from plasma_mcp.errors import ValidationError

TX_HASH_REGEX = re.compile(r"^0x[a-fA-F0-9]{64}$")
HEX_DATA_REGEX = re.compile(r"^0x(?:[a-fA-F0-9]{2})*$")
INTEGER_REGEX = re.compile(r"^\d+$")
POSITIVE_INTEGER_REGEX = re.compile(r"^0*[1-9]\d*$")


def is_valid_address(address: Any) -> bool:
    """Format validation for 0x-prefixed 20-byte hex addresses."""
    if not isinstance(address, str):
        return False
    return bool(ADDRESS_REGEX.fullmatch(address))


def is_valid_tx_hash(tx_hash: Any) -> bool:
    if not isinstance(tx_hash, str):
        return False
    return bool(TX_HASH_REGEX.fullmatch(tx_hash))


def is_valid_amount(amount: Any) -> bool:
    if not isinstance(amount, str):
        return False
    return bool(DECIMAL_AMOUNT_REGEX.fullmatch(amount))


def require_address(value: Any, field: str) -> str:
    if value is None or value == "":
        raise ValidationError(field, "is required")
    if not is_valid_address(value):
        raise ValidationError(field, "must be a 0x-prefixed 40 hex character address")
    return value


def optional_address(value: Any, field: str) -> Optional[str]:
    if value is None:
        return None
    return require_address(value, field)


def require_tx_hash(value: Any, field: str) -> str:
    if value is None or value == "":
        raise ValidationError(field, "is required")
    if not is_valid_tx_hash(value):
        raise ValidationError(field, "must be a 0x-prefixed 64 hex character transaction hash")
    return value


def require_amount(value: Any, field: str) -> str:
    if value is None or value == "":
        raise ValidationError(field, "is required")
    if not is_valid_amount(value):
        raise ValidationError(field, "must be a non-negative decimal number")
    return value


def optional_amount(value: Any, field: str) -> Optional[str]:
    if value is None:
        return None
    return require_amount(value, field)


def optional_hex_data(value: Any, field: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str) or not HEX_DATA_REGEX.fullmatch(value):
        raise ValidationError(field, "must be 0x-prefixed hex bytes")
    return value


def optional_integer_string(value: Any, field: str, *, minimum: int = 0) -> Optional[int]:
    """Accept an integer or a string of digits no smaller than ``minimum``."""
    if value is None:
        return None
    rule = "must be a non-negative integer" if minimum == 0 else f"must be an integer of at least {minimum}"
    if isinstance(value, bool):
        raise ValidationError(field, rule)
    if isinstance(value, str) and INTEGER_REGEX.fullmatch(value):
        value = int(value)
    if isinstance(value, int) and value >= minimum:
        return value
    raise ValidationError(field, rule)


def require_non_empty_string(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(field, "must be a non-empty string")
    return value.strip()


def require_choice(value: Any, field: str, choices: Iterable[str]) -> str:
    options = list(choices)
    if value not in options:
        raise ValidationError(field, f"must be one of {', '.join(options)}")
    return value


def require_int_range(value: Any, field: str, *, minimum: int, maximum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, "must be an integer")
    if value < minimum or value > maximum:
        raise ValidationError(field, f"must be between {minimum} and {maximum}")
    return value
