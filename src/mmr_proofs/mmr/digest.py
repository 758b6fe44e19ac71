"""
Digest Types

Two digest representations coexist in this library and are never mixed
within one verification:

- WideDigest: a 256-bit value carried as two 128-bit limbs (high, low),
  used by the Keccak scheme for the external ledger.
- CompactDigest: a single STARK field element, used by the Poseidon
  scheme for the internal proving domain.

Both are immutable and compare by value.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple, Union

from ..constants import (
    COMPACT_SLOTS,
    LIMB_BITS,
    LIMB_MASK,
    STARK_PRIME,
    WIDE_DIGEST_BYTES,
    WIDE_SLOTS,
)


@dataclass(frozen=True)
class WideDigest:
    """
    A 256-bit digest split into high and low 128-bit limbs.

    Attributes:
        high: Most significant 128 bits
        low: Least significant 128 bits
    """
    high: int
    low: int

    WIDTH = WIDE_SLOTS

    def __post_init__(self) -> None:
        for name, limb in (("high", self.high), ("low", self.low)):
            if isinstance(limb, bool) or not isinstance(limb, int):
                raise ValueError(f"{name} limb must be an integer, got {type(limb).__name__}")
            if limb < 0 or limb > LIMB_MASK:
                raise ValueError(f"{name} limb out of range for {LIMB_BITS} bits: {limb}")

    @classmethod
    def from_int(cls, value: int) -> "WideDigest":
        """
        Split a 256-bit integer into limbs.

        Raises:
            ValueError: If value is negative or does not fit in 256 bits
        """
        if value < 0 or value >> (2 * LIMB_BITS):
            raise ValueError(f"Value does not fit in 256 bits: {value}")
        return cls(high=value >> LIMB_BITS, low=value & LIMB_MASK)

    @classmethod
    def from_bytes(cls, data: bytes) -> "WideDigest":
        """Build a digest from 32 big-endian bytes (high limb first)."""
        if len(data) != WIDE_DIGEST_BYTES:
            raise ValueError(f"Expected {WIDE_DIGEST_BYTES} bytes, got {len(data)}")
        return cls.from_int(int.from_bytes(data, "big"))

    @classmethod
    def from_fields(cls, fields: Sequence[int]) -> "WideDigest":
        high, low = fields
        return cls(high=high, low=low)

    @classmethod
    def zero(cls) -> "WideDigest":
        return cls(high=0, low=0)

    def to_int(self) -> int:
        return (self.high << LIMB_BITS) | self.low

    def to_bytes(self) -> bytes:
        return self.to_int().to_bytes(WIDE_DIGEST_BYTES, "big")

    def to_fields(self) -> Tuple[int, int]:
        return (self.high, self.low)

    def hex(self) -> str:
        return f"0x{self.to_bytes().hex()}"


@dataclass(frozen=True)
class CompactDigest:
    """
    A digest that is a single element of the STARK field.

    Attributes:
        value: Field element, 0 <= value < STARK_PRIME
    """
    value: int

    WIDTH = COMPACT_SLOTS

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValueError(f"Field element must be an integer, got {type(self.value).__name__}")
        if self.value < 0 or self.value >= STARK_PRIME:
            raise ValueError(f"Value is not a STARK field element: {self.value}")

    @classmethod
    def from_int(cls, value: int) -> "CompactDigest":
        return cls(value=value)

    @classmethod
    def from_fields(cls, fields: Sequence[int]) -> "CompactDigest":
        (value,) = fields
        return cls(value=value)

    @classmethod
    def zero(cls) -> "CompactDigest":
        return cls(value=0)

    def to_int(self) -> int:
        return self.value

    def to_fields(self) -> Tuple[int]:
        return (self.value,)

    def hex(self) -> str:
        return f"0x{self.value:064x}"


Digest = Union[WideDigest, CompactDigest]
