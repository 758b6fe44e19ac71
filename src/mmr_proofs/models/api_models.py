"""
API Models

This module defines Pydantic models for API request and response validation.
Digests travel as '0x' hex strings of their full integer value; raw wire
slots may be integers, hex strings or decimal strings.
"""

from datetime import datetime, timezone
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import MODE_COMPACT, MODE_WIDE


def _check_hex(value: str) -> str:
    if not isinstance(value, str) or not value.startswith("0x") or len(value) < 3:
        raise ValueError("Must be a hex string starting with '0x'")
    if not all(c in "0123456789abcdefABCDEF" for c in value[2:]):
        raise ValueError(f"Invalid hex string: {value}")
    return value


class ErrorResponse(BaseModel):
    """
    Response model for API errors.

    Attributes:
        error: Error message
        code: Error code (string identifier)
        details: Additional error details
    """
    error: str = Field(..., description="Error message")
    code: str = Field(..., description="Error code")
    details: Optional[dict] = Field(default=None, description="Additional error details")


class HealthResponse(BaseModel):
    """
    Response model for health check endpoint.

    Attributes:
        status: Service status
        schemes: Hash schemes the service can verify
        version: Service version
        timestamp: Response timestamp
    """
    status: str = Field(..., description="Service status")
    schemes: List[str] = Field(default_factory=list, description="Available hash schemes")
    version: str = Field(default="0.1.0", description="Service version")
    timestamp: Optional[str] = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        description="Response timestamp",
    )


class VerifyRequest(BaseModel):
    """
    Request model for structured proof verification.

    Attributes:
        mode: Hash scheme (1 = wide/Keccak, 2 = compact/Poseidon)
        root: Claimed root as hex string
        leaf: Raw leaf value as hex string
        expected_leaf: Optional leaf the caller expects to be proven
        leaf_index: Zero-based leaf position
        mmr_size: Number of leaves in the structure
        siblings: Sibling path as hex strings, leaf level first
        peaks: Peak set as hex strings, tallest mountain first
    """
    mode: int = Field(..., description="Hash scheme: 1 = wide/Keccak, 2 = compact/Poseidon")
    root: str = Field(..., description="Claimed root as hex string")
    leaf: str = Field(..., description="Raw leaf value as hex string")
    expected_leaf: Optional[str] = Field(default=None, description="Leaf the caller expects to be proven")
    leaf_index: int = Field(..., ge=0, description="Zero-based leaf position")
    mmr_size: int = Field(..., ge=0, description="Number of leaves in the structure")
    siblings: List[str] = Field(default_factory=list, description="Sibling path, leaf level first")
    peaks: List[str] = Field(default_factory=list, description="Peak set, tallest mountain first")

    @field_validator("mode")
    @classmethod
    def validate_mode(cls, v):
        """Validate the scheme selector."""
        if v not in (MODE_WIDE, MODE_COMPACT):
            raise ValueError(f"mode must be {MODE_WIDE} (wide) or {MODE_COMPACT} (compact)")
        return v

    @field_validator("root", "leaf")
    @classmethod
    def validate_hex_format(cls, v):
        return _check_hex(v)

    @field_validator("expected_leaf")
    @classmethod
    def validate_expected_leaf(cls, v):
        if v is not None:
            _check_hex(v)
        return v

    @field_validator("siblings", "peaks")
    @classmethod
    def validate_digest_list(cls, v):
        """Validate every digest is a proper hex string."""
        for item in v:
            _check_hex(item)
        return v

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "mode": 2,
                "root": "0x0380ff4f2e3bdd2cb1e9f6a7d2e37c4e04a7cd6b3b7a3e3c2b1c2fa1d0e5b5a8",
                "leaf": "0x06d2c7e0b1c06e2bb4e7d1b0a5e8d7c7b4b0f1b2c3d4e5f60718293a4b5c6d7e",
                "leaf_index": 0,
                "mmr_size": 2,
                "siblings": ["0x01c2b3a4958677d6e5f4031221f0e9d8c7b6a5948372615f4e3d2c1b0a998877"],
                "peaks": ["0x0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"],
            }
        }
    )


class RawVerifyRequest(BaseModel):
    """
    Request model for verification of an encoded field sequence.

    Attributes:
        fields: Flat encoded request; integers, hex strings or decimal strings
    """
    fields: List[Union[int, str]] = Field(..., description="Encoded request slots")


class VerifyResponse(BaseModel):
    """
    Response model for a verification verdict.

    Attributes:
        valid: Whether the leaf is proven included
        result_code: 0 when valid, 1 when invalid
        reason: The gate that decided the verdict
        mode: Hash scheme the request was verified under
    """
    valid: bool = Field(..., description="Whether the leaf is proven included")
    result_code: int = Field(..., description="0 = valid, 1 = invalid")
    reason: str = Field(..., description="Gate that decided the verdict")
    mode: int = Field(..., description="Hash scheme of the request")


class CommitmentRequest(BaseModel):
    """Request model for deposit commitment hashing."""
    recipient: str = Field(..., description="Recipient L2 address (hex or decimal)")
    amount: int = Field(..., ge=0, description="USD amount to mint")
    nonce: int = Field(..., ge=0, description="Transaction nonce")
    timestamp: int = Field(..., ge=0, description="Block timestamp")


class CommitmentResponse(BaseModel):
    """Response model for deposit commitment hashing."""
    commitment_hash: str = Field(..., description="Commitment hash as hex string")
    commitment_decimal: str = Field(..., description="Commitment hash as decimal felt")
