"""
MMR Hash Schemes

This module provides the two hash schemes an MMR proof can be committed
under. A scheme is selected once per request by its mode discriminator and
used for every combination in that request.

- KeccakScheme (mode 1): Keccak-256 over 32-byte big-endian operands,
  producing wide (two-limb) digests compatible with the external ledger.
- PoseidonScheme (mode 2): Poseidon over STARK field elements, producing
  compact digests for the internal proving domain.
"""

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Dict, Sequence, Type

from poseidon_py.poseidon_hash import poseidon_hash, poseidon_hash_many
from web3 import Web3

from ..constants import LIMB_MASK, MAX_U64, MODE_COMPACT, MODE_WIDE
from .digest import CompactDigest, Digest, WideDigest


class SchemeMismatchError(TypeError, ValueError):
    """Raised when a digest of one scheme is handed to the other."""
    pass


class HashMode(IntEnum):
    """Mode discriminator selecting the hash scheme of a request."""
    WIDE = MODE_WIDE
    COMPACT = MODE_COMPACT


class HashScheme(ABC):
    """
    Pairwise and sequence hashing over one digest representation.

    Implementations are stateless; a single instance may be shared by any
    number of concurrent callers.
    """

    name: str = ""
    mode: HashMode
    digest_type: Type

    @abstractmethod
    def combine_pair(self, left: Digest, right: Digest) -> Digest:
        """Hash two digests, in order, into one."""

    @abstractmethod
    def combine_many(self, values: Sequence[Digest]) -> Digest:
        """Hash an ordered sequence of digests into one."""

    @abstractmethod
    def embed_scalar(self, value: int) -> Digest:
        """Embed a non-negative integer (the structure size) as a digest."""

    def hash_leaf(self, leaf: Digest) -> Digest:
        """Digest of a raw leaf value: the sequence hash of that single value."""
        return self.combine_many([leaf])

    def zero(self) -> Digest:
        return self.digest_type.zero()

    def check(self, *digests: Digest) -> None:
        """
        Ensure every digest belongs to this scheme.

        Raises:
            SchemeMismatchError: If any digest has the other representation
        """
        for digest in digests:
            if not isinstance(digest, self.digest_type):
                raise SchemeMismatchError(
                    f"{self.name} scheme expects {self.digest_type.__name__}, "
                    f"got {type(digest).__name__}"
                )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(mode={int(self.mode)})"


class KeccakScheme(HashScheme):
    """
    Wide scheme: Keccak-256 over the concatenated 256-bit operands.

    Examples:
        >>> scheme = KeccakScheme()
        >>> scheme.combine_pair(WideDigest.zero(), WideDigest.zero()).hex()
        '0xad3228b676f7d3cd4284a5443f17f1962b36e491b30a40b2405849e597ba5fb5'
    """

    name = "keccak"
    mode = HashMode.WIDE
    digest_type = WideDigest

    def _keccak(self, data: bytes) -> WideDigest:
        return WideDigest.from_bytes(bytes(Web3.keccak(data)))

    def combine_pair(self, left: WideDigest, right: WideDigest) -> WideDigest:
        self.check(left, right)
        return self._keccak(left.to_bytes() + right.to_bytes())

    def combine_many(self, values: Sequence[WideDigest]) -> WideDigest:
        self.check(*values)
        return self._keccak(b"".join(value.to_bytes() for value in values))

    def embed_scalar(self, value: int) -> WideDigest:
        # Size goes in the low limb, high limb stays zero
        if value < 0 or value > LIMB_MASK:
            raise ValueError(f"Scalar does not fit in the low limb: {value}")
        return WideDigest(high=0, low=value)


class PoseidonScheme(HashScheme):
    """Compact scheme: Poseidon hash over STARK field elements."""

    name = "poseidon"
    mode = HashMode.COMPACT
    digest_type = CompactDigest

    def combine_pair(self, left: CompactDigest, right: CompactDigest) -> CompactDigest:
        self.check(left, right)
        return CompactDigest(poseidon_hash(left.value, right.value))

    def combine_many(self, values: Sequence[CompactDigest]) -> CompactDigest:
        self.check(*values)
        return CompactDigest(poseidon_hash_many([value.value for value in values]))

    def embed_scalar(self, value: int) -> CompactDigest:
        if value < 0 or value > MAX_U64:
            raise ValueError(f"Scalar does not fit in 64 bits: {value}")
        return CompactDigest(value)


_SCHEMES: Dict[HashMode, HashScheme] = {
    HashMode.WIDE: KeccakScheme(),
    HashMode.COMPACT: PoseidonScheme(),
}


def get_scheme(mode: int) -> HashScheme:
    """
    Return the hash scheme selected by a mode discriminator.

    Args:
        mode: 1 for the wide Keccak scheme, 2 for the compact Poseidon scheme

    Returns:
        Shared scheme instance

    Raises:
        ValueError: If the mode is not recognized
    """
    try:
        return _SCHEMES[HashMode(mode)]
    except ValueError:
        raise ValueError(f"Unknown hash mode: {mode!r}") from None
