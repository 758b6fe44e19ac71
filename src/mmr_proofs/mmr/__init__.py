"""
Merkle Mountain Range Verification

This package provides the dual-scheme MMR inclusion-proof verifier.

The package is organized into four components:
- digest: Wide (two-limb) and compact (single field element) digest types
- hashing: Keccak and Poseidon hash schemes and mode selection
- peaks: Peak computation, mountain geometry and peak bagging
- verify: The proof verifier and its request type
"""

from .digest import CompactDigest, Digest, WideDigest

from .hashing import (
    HashMode,
    HashScheme,
    KeccakScheme,
    PoseidonScheme,
    SchemeMismatchError,
    get_scheme,
)

from .peaks import (
    LeafLocation,
    ParityConvention,
    bag_peaks,
    climb_start_index,
    compute_peak,
    compute_root,
    is_left_child,
    locate_leaf,
    mountain_heights,
    parent_index,
    peak_count,
)

from .verify import (
    PeakMatchMode,
    VerificationOutcome,
    VerificationRequest,
    explain,
    verify,
)

__all__ = [
    # Digests
    "CompactDigest",
    "Digest",
    "WideDigest",
    # Hash schemes
    "HashMode",
    "HashScheme",
    "KeccakScheme",
    "PoseidonScheme",
    "SchemeMismatchError",
    "get_scheme",
    # Peaks
    "LeafLocation",
    "ParityConvention",
    "bag_peaks",
    "climb_start_index",
    "compute_peak",
    "compute_root",
    "is_left_child",
    "locate_leaf",
    "mountain_heights",
    "parent_index",
    "peak_count",
    # Verifier
    "PeakMatchMode",
    "VerificationOutcome",
    "VerificationRequest",
    "explain",
    "verify",
]
