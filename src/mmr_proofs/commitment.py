"""
Deposit Commitment Hashing

A deposit is tracked end to end by a commitment hash: the Poseidon hash of
its mint data as STARK field elements. The hash matches the one the L2
contract computes, and it is the raw leaf value proven under the compact
scheme.
"""

import logging
from dataclasses import dataclass
from typing import List

from .constants import LIMB_MASK, MAX_U64, STARK_PRIME
from .mmr.digest import CompactDigest
from .mmr.hashing import HashMode, get_scheme

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MintData:
    """
    Data for minting tokens on L2, in felt-compatible ranges.

    Attributes:
        recipient: L2 address of the recipient (felt252)
        amount: USD amount to mint (u128)
        nonce: Transaction nonce (u64)
        timestamp: Block timestamp (u64)
    """
    recipient: int
    amount: int
    nonce: int
    timestamp: int

    def __post_init__(self) -> None:
        limits = {
            "recipient": STARK_PRIME - 1,
            "amount": LIMB_MASK,
            "nonce": MAX_U64,
            "timestamp": MAX_U64,
        }
        for name, limit in limits.items():
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {type(value).__name__}")
            if value < 0 or value > limit:
                raise ValueError(f"{name} out of range: {value}")

    def to_field_elements(self) -> List[int]:
        return [self.recipient, self.amount, self.nonce, self.timestamp]


def compute_commitment_hash(
    recipient: int, amount: int, nonce: int, timestamp: int
) -> CompactDigest:
    """
    Compute the Poseidon commitment hash of a deposit.

    Args:
        recipient: L2 address of the recipient
        amount: USD amount to mint
        nonce: Transaction nonce
        timestamp: Block timestamp

    Returns:
        The commitment hash as a compact digest

    Raises:
        ValueError: If any input is out of its range
    """
    mint_data = MintData(recipient, amount, nonce, timestamp)
    scheme = get_scheme(HashMode.COMPACT)
    commitment = scheme.combine_many(
        [CompactDigest(element) for element in mint_data.to_field_elements()]
    )
    logger.debug(f"Commitment for nonce {nonce}: {commitment.hex()}")
    return commitment
