"""
MMR Proof Constants and Limits

This module contains the constants shared by the hash schemes, the proof
verifier and the wire decoder.

References:
- STARK field: https://docs.starknet.io/architecture-and-concepts/cryptography/
- Keccak-256 as used by the EVM: https://ethereum.github.io/yellowpaper/paper.pdf
"""

# ====================
# Field and Limb Sizes
# ====================

# Prime of the STARK field; every compact digest and every wire slot is below it
STARK_PRIME = 2**251 + 17 * 2**192 + 1

# A wide digest is a 256-bit value split into two 128-bit limbs
LIMB_BITS = 128
LIMB_MASK = (1 << LIMB_BITS) - 1
WIDE_DIGEST_BYTES = 32

# ====================
# Native Integer Widths
# ====================

# leaf_index and mmr_size must fit in an unsigned 64-bit integer
MAX_U64 = 2**64 - 1

# ====================
# Wire Protocol
# ====================

# Mode discriminators at position 0 of an encoded request
MODE_WIDE = 1
MODE_COMPACT = 2

# Slots occupied by one digest on the wire, per mode
WIDE_SLOTS = 2
COMPACT_SLOTS = 1

# A structure of at most 2**64 - 1 leaves has mountains of height <= 63
# and at most 64 peaks. Counts above these are rejected before allocation.
MAX_PATH_LENGTH = 64
MAX_PEAK_COUNT = 64

# ====================
# Prover Input Files
# ====================

PROGRAM_INPUT_JSON = "input.cairo1.json"
PROGRAM_INPUT_TXT = "input.cairo1.txt"
