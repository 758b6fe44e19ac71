"""
MMR Proofs

Dual-scheme Merkle Mountain Range inclusion-proof verification for the
bridge between the external ledger (Keccak, wide digests) and the proving
domain (Poseidon, compact digests).

Usage:
    from mmr_proofs import decode_and_verify, ResultCode

    code = decode_and_verify(fields)
    if code is ResultCode.VALID:
        ...
"""

from .commitment import MintData, compute_commitment_hash
from .mmr import (
    CompactDigest,
    HashMode,
    ParityConvention,
    PeakMatchMode,
    SchemeMismatchError,
    VerificationOutcome,
    VerificationRequest,
    WideDigest,
    bag_peaks,
    compute_peak,
    compute_root,
    explain,
    get_scheme,
    verify,
)
from .wire import (
    DecodeError,
    ResultCode,
    decode_and_verify,
    decode_request,
    encode_request,
    write_program_inputs,
)

__version__ = "0.1.0"

__all__ = [
    "CompactDigest",
    "DecodeError",
    "HashMode",
    "MintData",
    "ParityConvention",
    "PeakMatchMode",
    "ResultCode",
    "SchemeMismatchError",
    "VerificationOutcome",
    "VerificationRequest",
    "WideDigest",
    "bag_peaks",
    "compute_commitment_hash",
    "compute_peak",
    "compute_root",
    "decode_and_verify",
    "decode_request",
    "encode_request",
    "explain",
    "get_scheme",
    "verify",
    "write_program_inputs",
]
