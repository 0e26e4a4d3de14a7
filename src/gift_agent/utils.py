"""Utility functions for the gift agent."""

import math
import re
from decimal import Decimal
from typing import Any

from web3 import Web3

from .constants import PLACEHOLDER_ADDRESS
from .exceptions import ValidationError

ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")


def is_address(value: Any) -> bool:
    """Return True for a 42 character 0x-prefixed hex string."""
    return isinstance(value, str) and bool(ADDRESS_RE.match(value))


def is_placeholder_address(value: Any) -> bool:
    """Detect the unconfigured contract address placeholders."""
    if not isinstance(value, str) or not value:
        return True
    if value.lower() == PLACEHOLDER_ADDRESS:
        return True
    try:
        return int(value, 16) == 0
    except ValueError:
        return False


def is_unset_number(value: Any) -> bool:
    """Return True for None, infinity and NaN sentinels."""
    if value is None:
        return True
    if isinstance(value, float):
        return math.isinf(value) or math.isnan(value)
    return False


def to_checksum(value: str, field: str) -> str:
    """Checksum an address, raising ValidationError on garbage."""
    try:
        return Web3.to_checksum_address(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid address for {field}", field=field, value=value) from exc


def format_ether(value_wei: int) -> str:
    """Format a wei amount as a plain decimal string of ether."""
    amount = Web3.from_wei(value_wei, "ether")
    return format(Decimal(amount).normalize(), "f")


def env_int(raw: str | None, default: int | None = None) -> int | None:
    """Parse an integer environment value, returning ``default`` when unset."""
    if raw is None or raw.strip() == "":
        return default
    text = raw.strip()
    return int(text, 16) if text.lower().startswith("0x") else int(text)


HEX_BLOB_RE = re.compile(r"^0x(?:[0-9a-fA-F]{2})+$")


def is_hex_blob(value: Any) -> bool:
    """Return True for a non-empty, even length 0x-prefixed hex string."""
    return isinstance(value, str) and bool(HEX_BLOB_RE.match(value))


def fits_uint(value: Any, bits: int) -> bool:
    """Return True when ``value`` is a whole number encodable as ``uint<bits>``."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if isinstance(value, float) and not value.is_integer():
        return False
    return 0 <= value < 2**bits
