"""
MMR Inclusion Proof Verification

This module decides whether a leaf is provably included in a committed
Merkle Mountain Range. Verification is a pure function of the request:
it holds no state, performs no I/O and never raises on a well-formed
request. Every rejection path returns False.

Gates, in order:
1. The request's leaf equals the caller's expected leaf (when given).
2. The peak set has the canonical count and bags to the claimed root.
3. The sibling path length equals the height of the leaf's mountain.
4. The peak computed from the leaf matches the peak set.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from ..constants import MAX_U64
from .digest import Digest
from .hashing import HashMode, SchemeMismatchError, get_scheme
from .peaks import (
    ParityConvention,
    climb_start_index,
    compute_peak,
    compute_root,
    locate_leaf,
    peak_count,
)

logger = logging.getLogger(__name__)


class PeakMatchMode(Enum):
    """
    How the computed peak is matched against the peak set.

    POSITIONAL requires the computed peak at the position of the leaf's
    mountain and is the default. ANYWHERE accepts the computed peak at any
    position; it is a legacy compatibility mode for proofs produced by
    older generators and should not be used for new integrations.
    """
    POSITIONAL = "positional"
    ANYWHERE = "anywhere"


@dataclass(frozen=True)
class VerificationRequest:
    """
    Immutable input bundle for one verification.

    Attributes:
        mode: Hash scheme selector (1 wide/Keccak, 2 compact/Poseidon)
        root: Claimed root of the structure
        leaf: Raw leaf value, not pre-hashed
        leaf_index: Zero-based position of the leaf among all leaves
        mmr_size: Number of leaves in the structure at proof time
        siblings: Sibling path from the leaf level upward
        peaks: Peak set, tallest mountain first
    """
    mode: HashMode
    root: Digest
    leaf: Digest
    leaf_index: int
    mmr_size: int
    siblings: Tuple[Digest, ...] = field(default_factory=tuple)
    peaks: Tuple[Digest, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        scheme = get_scheme(self.mode)
        object.__setattr__(self, "mode", scheme.mode)
        object.__setattr__(self, "siblings", tuple(self.siblings))
        object.__setattr__(self, "peaks", tuple(self.peaks))

        for name in ("leaf_index", "mmr_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {type(value).__name__}")
            if value < 0 or value > MAX_U64:
                raise ValueError(f"{name} does not fit in 64 bits: {value}")

        scheme.check(self.root, self.leaf, *self.siblings, *self.peaks)

    @property
    def scheme(self):
        return get_scheme(self.mode)


@dataclass(frozen=True)
class VerificationOutcome:
    """Verdict of a verification together with the gate that decided it."""
    valid: bool
    reason: str

    def __bool__(self) -> bool:
        return self.valid


def explain(
    request: VerificationRequest,
    expected_leaf: Optional[Digest] = None,
    *,
    peak_match: PeakMatchMode = PeakMatchMode.POSITIONAL,
    convention: ParityConvention = ParityConvention.ODD_IS_LEFT,
    relax_peak_count_below: int = 0,
) -> VerificationOutcome:
    """
    Verify an inclusion proof and report which gate decided the verdict.

    Args:
        request: The proof request to check
        expected_leaf: Leaf value the caller expects to be proven; when
            given, a request for any other leaf is rejected
        peak_match: Positional (default) or legacy anywhere-match
        convention: Parity convention the sibling path was generated with
        relax_peak_count_below: Compact-scheme requests with mmr_size below
            this value skip the canonical peak count check (0 disables)

    Returns:
        VerificationOutcome; truthy when the leaf is proven included
    """
    scheme = request.scheme

    if expected_leaf is not None and expected_leaf != request.leaf:
        return _reject(request, "leaf does not match the expected leaf")

    relaxed = (
        request.mode is HashMode.COMPACT and request.mmr_size < relax_peak_count_below
    )
    if not relaxed and len(request.peaks) != peak_count(request.mmr_size):
        return _reject(
            request,
            f"expected {peak_count(request.mmr_size)} peaks for size "
            f"{request.mmr_size}, got {len(request.peaks)}",
        )

    if compute_root(request.peaks, request.mmr_size, scheme) != request.root:
        return _reject(request, "peaks do not bag to the claimed root")

    try:
        location = locate_leaf(request.leaf_index, request.mmr_size)
    except ValueError as e:
        return _reject(request, str(e))

    if len(request.siblings) != location.height:
        return _reject(
            request,
            f"sibling path has {len(request.siblings)} entries, "
            f"mountain height is {location.height}",
        )

    leaf_digest = scheme.hash_leaf(request.leaf)
    start = climb_start_index(location.local_position, location.height, convention)
    peak = compute_peak(start, leaf_digest, request.siblings, scheme, convention)

    if peak_match is PeakMatchMode.ANYWHERE:
        if peak not in request.peaks:
            return _reject(request, "computed peak is not in the peak set")
    else:
        if location.peak_position >= len(request.peaks):
            return _reject(request, "peak set has no entry for the leaf's mountain")
        if request.peaks[location.peak_position] != peak:
            return _reject(
                request,
                f"computed peak does not match peak {location.peak_position}",
            )

    logger.debug(
        f"Leaf {request.leaf_index} proven in structure of {request.mmr_size} "
        f"({scheme.name})"
    )
    return VerificationOutcome(True, "proof valid")


def verify(
    request: VerificationRequest,
    expected_leaf: Optional[Digest] = None,
    *,
    peak_match: PeakMatchMode = PeakMatchMode.POSITIONAL,
    convention: ParityConvention = ParityConvention.ODD_IS_LEFT,
    relax_peak_count_below: int = 0,
) -> bool:
    """
    Verify an inclusion proof.

    Returns:
        True only if every gate passes
    """
    return explain(
        request,
        expected_leaf,
        peak_match=peak_match,
        convention=convention,
        relax_peak_count_below=relax_peak_count_below,
    ).valid


def _reject(request: VerificationRequest, reason: str) -> VerificationOutcome:
    logger.debug(f"Rejecting proof for leaf {request.leaf_index}: {reason}")
    return VerificationOutcome(False, reason)


__all__ = [
    "PeakMatchMode",
    "SchemeMismatchError",
    "VerificationOutcome",
    "VerificationRequest",
    "explain",
    "verify",
]
