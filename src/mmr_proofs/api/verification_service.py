"""
Verification Service Module

This module provides a service layer between the outer surfaces (REST API,
CLI) and the verifier core. It converts JSON-shaped payloads into typed
requests, applies the configured verifier options and formats verdicts.
"""

import logging
from typing import Any, Dict, Optional, Sequence, Union

from ..commitment import compute_commitment_hash
from ..config import Settings, get_settings
from ..mmr import HashMode, VerificationRequest, explain, get_scheme
from ..models.api_models import VerifyRequest
from ..utils.hex_helpers import parse_digest, parse_field_value
from ..wire import DecodeError, ResultCode, decode_request

logger = logging.getLogger(__name__)


class VerificationServiceError(Exception):
    """Custom exception for verification service operations."""
    pass


class VerificationService:
    """Service for verifying MMR inclusion proofs."""

    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialize the verification service.

        Args:
            settings: Runtime settings. If None, they are read from the environment.
        """
        self.settings = settings or get_settings()

    def build_request(self, payload: VerifyRequest) -> VerificationRequest:
        """
        Convert a structured payload into a VerificationRequest.

        Raises:
            ValueError: If a digest does not fit the selected scheme
        """
        scheme = get_scheme(payload.mode)
        return VerificationRequest(
            mode=scheme.mode,
            root=parse_digest(payload.root, scheme),
            leaf=parse_digest(payload.leaf, scheme),
            leaf_index=payload.leaf_index,
            mmr_size=payload.mmr_size,
            siblings=tuple(parse_digest(s, scheme) for s in payload.siblings),
            peaks=tuple(parse_digest(p, scheme) for p in payload.peaks),
        )

    def verify(self, payload: Union[VerifyRequest, Dict[str, Any]]) -> Dict[str, Any]:
        """
        Verify a structured proof payload.

        Args:
            payload: VerifyRequest model or an equivalent dictionary

        Returns:
            Dictionary matching the VerifyResponse model

        Raises:
            ValueError: If the payload is invalid for its scheme
            VerificationServiceError: If verification fails unexpectedly
        """
        if not isinstance(payload, VerifyRequest):
            payload = VerifyRequest(**payload)

        request = self.build_request(payload)
        expected_leaf = None
        if payload.expected_leaf is not None:
            expected_leaf = parse_digest(payload.expected_leaf, request.scheme)

        return self._run(request, expected_leaf)

    def verify_raw(self, fields: Sequence[Union[int, str]]) -> Dict[str, Any]:
        """
        Verify an encoded field sequence.

        Raises:
            DecodeError: If the sequence is malformed
            VerificationServiceError: If verification fails unexpectedly
        """
        try:
            values = [parse_field_value(value) for value in fields]
        except ValueError as e:
            raise DecodeError(str(e)) from None

        request = decode_request(values)
        return self._run(request, None)

    def compute_commitment(
        self, recipient: Union[int, str], amount: int, nonce: int, timestamp: int
    ) -> Dict[str, str]:
        """Compute a deposit commitment hash and format it as hex and decimal."""
        commitment = compute_commitment_hash(
            parse_field_value(recipient), amount, nonce, timestamp
        )
        return {
            "commitment_hash": commitment.hex(),
            "commitment_decimal": str(commitment.value),
        }

    def _run(self, request: VerificationRequest, expected_leaf) -> Dict[str, Any]:
        try:
            outcome = explain(request, expected_leaf, **self.settings.verifier_options())
        except Exception as e:
            logger.error(f"Error verifying proof for leaf {request.leaf_index}: {e}")
            raise VerificationServiceError(f"Failed to verify proof: {e}") from e

        code = ResultCode.VALID if outcome.valid else ResultCode.INVALID
        logger.info(
            f"Leaf {request.leaf_index} of {request.mmr_size} "
            f"({HashMode(request.mode).name.lower()}): {code.name}"
        )
        return {
            "valid": outcome.valid,
            "result_code": int(code),
            "reason": outcome.reason,
            "mode": int(request.mode),
        }
