"""Conversions between human decimal amounts and base units, and token symbol lookup."""

from __future__ import annotations

import re
from typing import Mapping, Optional

from eth_utils import is_hex_address, to_checksum_address

from plasma_mcp.config import NATIVE_TOKEN
from plasma_mcp.errors import InvalidAmountError

DECIMAL_AMOUNT_REGEX = re.compile(r"^\d+\.?\d*$")
ADDRESS_REGEX = re.compile(r"^0x[a-fA-F0-9]{40}$")
GWEI_DECIMALS = 9


def to_base_units(amount: str, decimals: int, *, field: str = "amount") -> int:
    """
    Convert a human decimal string ("1.5") to integer base units.

    Raises:
        InvalidAmountError: if the string is not a non-negative decimal or carries
            more fractional digits than ``decimals`` allows.
    """
    if not isinstance(amount, str) or not DECIMAL_AMOUNT_REGEX.fullmatch(amount.strip()):
        raise InvalidAmountError(field, "must be a non-negative decimal number")
    whole, _, fraction = amount.strip().partition(".")
    fraction = fraction.rstrip("0")
    if len(fraction) > decimals:
        raise InvalidAmountError(field, f"at most {decimals} decimal places allowed")
    return int(whole) * 10**decimals + int(fraction.ljust(decimals, "0") or "0")


def to_decimal_string(base_units: int, decimals: int) -> str:
    """Render integer base units as a decimal string, e.g. 1500000000000000000 -> "1.5"."""
    if base_units < 0:
        return "-" + to_decimal_string(-base_units, decimals)
    whole, remainder = divmod(base_units, 10**decimals)
    fraction = str(remainder).rjust(decimals, "0").rstrip("0") if decimals else ""
    return f"{whole}.{fraction or '0'}"


def format_amount(base_units: int, symbol: str, decimals: int = 18) -> str:
    return f"{to_decimal_string(base_units, decimals)} {symbol}"


def format_gwei(wei: int) -> str:
    return f"{to_decimal_string(wei, GWEI_DECIMALS)} gwei"


def resolve_token_address(token: Optional[str], tokens: Mapping[str, str]) -> Optional[str]:
    """
    Resolve a token symbol or address.

    Address-shaped input is returned verbatim. Symbols are looked up
    case-insensitively in ``tokens``; the result is an address, the NATIVE
    sentinel, or None when the token is unknown.
    """
    if not token:
        return None
    candidate = token.strip()
    if ADDRESS_REGEX.fullmatch(candidate):
        return candidate
    return tokens.get(candidate.lower())


def is_native(token_address: Optional[str]) -> bool:
    return token_address == NATIVE_TOKEN


def to_checksum(address: str) -> str:
    """Checksum an address, leaving non-address input untouched."""
    if is_hex_address(address):
        return to_checksum_address(address)
    return address
