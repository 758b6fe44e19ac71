"""
Utility Functions

This package provides hex string and field value helpers used by the API,
the CLI and the commitment tooling.
"""

from .hex_helpers import (
    felt252_to_hex,
    normalize_hex,
    parse_digest,
    parse_field_value,
)

__all__ = [
    'felt252_to_hex',
    'normalize_hex',
    'parse_digest',
    'parse_field_value',
]
