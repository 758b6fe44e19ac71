"""
API Models Package

This package contains request and response models for the verifier API.
It includes Pydantic models for validation and serialization of:

- Verification requests (structured and encoded)
- Verification verdicts
- Commitment hashing requests and responses
- Error responses and status models

Usage:
    from mmr_proofs.models import VerifyRequest, VerifyResponse

    request = VerifyRequest(mode=2, root="0x..", leaf="0x..", leaf_index=0, mmr_size=1)
"""

from .api_models import (
    CommitmentRequest,
    CommitmentResponse,
    ErrorResponse,
    HealthResponse,
    RawVerifyRequest,
    VerifyRequest,
    VerifyResponse,
)

__all__ = [
    'CommitmentRequest',
    'CommitmentResponse',
    'ErrorResponse',
    'HealthResponse',
    'RawVerifyRequest',
    'VerifyRequest',
    'VerifyResponse',
]
