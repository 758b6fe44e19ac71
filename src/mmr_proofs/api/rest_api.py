"""
REST API for MMR Proofs

This module provides a FastAPI-based REST API for verifying MMR inclusion
proofs with full OpenAPI documentation.
"""

import logging
import traceback

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import get_settings
from ..mmr import HashMode
from ..models.api_models import (
    CommitmentRequest,
    CommitmentResponse,
    ErrorResponse,
    HealthResponse,
    RawVerifyRequest,
    VerifyRequest,
    VerifyResponse,
)
from ..wire import DecodeError
from .verification_service import VerificationService, VerificationServiceError

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="MMR Proofs API",
    description="""
    Verify Merkle Mountain Range inclusion proofs for bridge deposits and withdrawals.

    Two hash schemes are supported and selected per request:
    - **Mode 1 (wide)**: Keccak-256 digests split into high/low 128-bit limbs
    - **Mode 2 (compact)**: Poseidon digests as single STARK field elements

    ## Endpoints
    - `/verify`: structured proof with hex digests
    - `/verify/raw`: flat encoded field sequence, as consumed by the prover
    - `/commitment`: deposit commitment hash (Poseidon)

    A verdict is `result_code` 0 (valid) or 1 (invalid). Malformed encodings
    are rejected with HTTP 400 and code `DECODE_ERROR`.
    """,
    version=__version__,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Global verification service instance
verification_service = None


def get_verification_service() -> VerificationService:
    """Dependency to get the verification service instance."""
    global verification_service
    if verification_service is None:
        verification_service = VerificationService()
    return verification_service


@app.exception_handler(DecodeError)
async def decode_error_handler(request, exc: DecodeError):
    """Handle malformed encoded requests."""
    logger.warning(f"Decode error: {exc}")
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            error=str(exc),
            code="DECODE_ERROR",
            details={"error_type": "DecodeError"}
        ).model_dump()
    )


@app.exception_handler(ValueError)
async def value_error_handler(request, exc: ValueError):
    """Handle validation errors."""
    logger.error(f"Validation error: {exc}")
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            error=str(exc),
            code="VALIDATION_ERROR",
            details={"error_type": type(exc).__name__}
        ).model_dump()
    )


@app.exception_handler(VerificationServiceError)
async def service_error_handler(request, exc: VerificationServiceError):
    """Handle verification service errors."""
    logger.error(f"Verification service error: {exc}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error=str(exc),
            code="VERIFICATION_ERROR",
            details={"error_type": "VerificationServiceError"}
        ).model_dump()
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle unexpected errors."""
    logger.error(f"Unexpected error: {exc}\n{traceback.format_exc()}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal server error",
            code="INTERNAL_ERROR",
            details={"error_type": type(exc).__name__}
        ).model_dump()
    )


@app.get("/", response_model=dict)
async def root():
    """API root endpoint with basic information."""
    return {
        "name": "MMR Proofs API",
        "version": __version__,
        "description": "Verify Merkle Mountain Range inclusion proofs",
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        schemes=[mode.name.lower() for mode in HashMode],
        version=__version__,
    )


@app.post("/verify", response_model=VerifyResponse)
async def verify_proof(
    request: VerifyRequest,
    service: VerificationService = Depends(get_verification_service)
):
    """
    Verify a structured inclusion proof.

    Digests are hex strings of their full integer value: 256-bit values for
    mode 1, STARK field elements for mode 2. When `expected_leaf` is given,
    a proof for any other leaf is rejected.
    """
    return VerifyResponse(**service.verify(request))


@app.post("/verify/raw", response_model=VerifyResponse)
async def verify_raw_proof(
    request: RawVerifyRequest,
    service: VerificationService = Depends(get_verification_service)
):
    """
    Verify a flat encoded request.

    Layout: `[mode, root..., leaf..., leaf_index, mmr_size, sibling_count,
    siblings..., peak_count, peaks...]`, two slots per digest (high, low)
    under mode 1 and one slot under mode 2.
    """
    return VerifyResponse(**service.verify_raw(request.fields))


@app.post("/commitment", response_model=CommitmentResponse)
async def commitment_hash(
    request: CommitmentRequest,
    service: VerificationService = Depends(get_verification_service)
):
    """Compute the Poseidon commitment hash of a deposit."""
    return CommitmentResponse(
        **service.compute_commitment(
            request.recipient, request.amount, request.nonce, request.timestamp
        )
    )


def run_server(host: str = None, port: int = None, dev: bool = False):
    """
    Run the API server.

    Args:
        host: Host to bind to (defaults to MMR_PROOFS_API_HOST)
        port: Port to bind to (defaults to MMR_PROOFS_API_PORT)
        dev: Enable development mode with auto-reload
    """
    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    logging.basicConfig(level=logging.INFO)
    logger.info(f"Starting MMR Proofs API server on {host}:{port}")
    uvicorn.run(
        "mmr_proofs.api.rest_api:app",
        host=host,
        port=port,
        reload=dev,
        log_level="info"
    )


if __name__ == "__main__":
    run_server(dev=True)
