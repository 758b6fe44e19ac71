"""
Hex String and Field Value Utilities

This module provides utilities for converting between the hex and decimal
strings used in JSON payloads and the integers carried on the wire.
"""

from typing import Optional, Union

from ..mmr.digest import Digest
from ..mmr.hashing import HashScheme


def normalize_hex(hex_str: str, expected_bytes: Optional[int] = None) -> str:
    """
    Normalize a hex string to ensure proper formatting.

    Args:
        hex_str: The hex string to normalize (should start with '0x')
        expected_bytes: Optional expected byte length for validation

    Returns:
        Lower-case hex string padded to an even number of digits

    Raises:
        ValueError: If the hex string contains invalid characters

    Examples:
        >>> normalize_hex("0x123")
        '0x0123'
        >>> normalize_hex("0xABCD")
        '0xabcd'
    """
    if not isinstance(hex_str, str) or not hex_str.startswith("0x"):
        return hex_str

    hex_part = hex_str[2:]

    if not hex_part or not all(c in "0123456789abcdefABCDEF" for c in hex_part):
        raise ValueError(f"Invalid hex string: {hex_str}")

    if len(hex_part) % 2 == 1:
        hex_part = "0" + hex_part

    normalized = "0x" + hex_part.lower()

    if expected_bytes is not None:
        actual_bytes = len(hex_part) // 2
        if actual_bytes != expected_bytes:
            raise ValueError(f"Expected {expected_bytes} bytes, got {actual_bytes} bytes")

    return normalized


def parse_field_value(value: Union[int, str]) -> int:
    """
    Parse an integer given as an int, a '0x' hex string or a decimal string.

    Examples:
        >>> parse_field_value("0x10")
        16
        >>> parse_field_value("42")
        42
    """
    if isinstance(value, bool):
        raise ValueError("Boolean is not a field value")
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Unsupported field value type: {type(value).__name__}")

    text = value.strip()
    if text.startswith("0x"):
        return int(normalize_hex(text), 16)
    if not text.isdigit():
        raise ValueError(f"Invalid field value: {value!r}")
    return int(text)


def parse_digest(value: Union[int, str], scheme: HashScheme) -> Digest:
    """Parse a hex or decimal value into a digest of the given scheme."""
    return scheme.digest_type.from_int(parse_field_value(value))


def felt252_to_hex(felt: str) -> str:
    """
    Convert a decimal felt252 string to 64 hex digits without prefix.

    Raises:
        ValueError: If the string is not a decimal number

    Examples:
        >>> felt252_to_hex("255")
        '00000000000000000000000000000000000000000000000000000000000000ff'
    """
    try:
        value = int(felt, 10)
    except (TypeError, ValueError):
        raise ValueError(f"Failed to parse felt252: {felt!r}") from None
    if value < 0:
        raise ValueError(f"Failed to parse felt252: {felt!r}")
    return f"{value:064x}"
