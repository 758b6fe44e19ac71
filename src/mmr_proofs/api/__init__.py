"""
Verifier API Package

This package exposes the verifier over HTTP and provides a client for it:

- VerificationService: Converts payloads into requests and formats verdicts
- VerifierAPIClient: HTTP client for a remote verifier service

Usage:
    from mmr_proofs.api import VerifierAPIClient

    client = VerifierAPIClient("http://127.0.0.1:8000")
    verdict = client.verify_raw(fields)
"""

from .client import VerifierAPIClient, VerifierAPIError
from .verification_service import VerificationService, VerificationServiceError

__all__ = [
    'VerificationService',
    'VerificationServiceError',
    'VerifierAPIClient',
    'VerifierAPIError',
]
