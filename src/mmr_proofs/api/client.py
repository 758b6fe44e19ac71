"""
Verifier API Client

This module provides a client for calling a remote verifier service over
its REST API.
"""

import logging
from typing import Any, Dict, Optional, Sequence, Union

import requests

from ..config import get_settings

logger = logging.getLogger(__name__)


class VerifierAPIError(Exception):
    """Exception raised for verifier API related errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class VerifierAPIClient:
    """
    Client for interacting with a verifier REST API.

    Provides methods for structured and encoded verification, commitment
    hashing and health checks, with transport errors wrapped in
    VerifierAPIError.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: float = 30):
        """
        Initialize the verifier API client.

        Args:
            base_url: Base URL for the verifier API. If None, uses MMR_PROOFS_API_URL.
            timeout: Request timeout in seconds
        """
        self.base_url = (base_url or get_settings().api_url).rstrip("/")
        self.timeout = timeout

        self.session = requests.Session()
        self.session.headers.update({
            'Content-Type': 'application/json',
            'Accept': 'application/json'
        })

        logger.info(f"Initialized VerifierAPIClient with base_url: {self.base_url}")

    def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.post(url, json=payload, timeout=self.timeout)
        except requests.ConnectionError as e:
            raise VerifierAPIError(
                f"Failed to connect to verifier API at {self.base_url}. "
                f"Original error: {e}"
            )
        except requests.Timeout as e:
            raise VerifierAPIError(
                f"Timeout connecting to verifier API at {self.base_url}. "
                f"Original error: {e}"
            )
        except requests.RequestException as e:
            raise VerifierAPIError(f"Request failed to verifier API at {self.base_url}. Error: {e}")

        if response.status_code >= 400:
            try:
                detail = response.json().get("error", response.text)
            except ValueError:
                detail = response.text
            raise VerifierAPIError(
                f"Verifier API returned {response.status_code}: {detail}",
                status_code=response.status_code,
            )
        return response.json()

    def verify(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Verify a structured proof remotely.

        Args:
            payload: Dictionary matching the VerifyRequest model

        Returns:
            Dictionary matching the VerifyResponse model
        """
        logger.info(f"Verifying leaf {payload.get('leaf_index')} remotely")
        return self._post("/verify", payload)

    def verify_raw(self, fields: Sequence[Union[int, str]]) -> Dict[str, Any]:
        """Verify an encoded field sequence remotely."""
        return self._post("/verify/raw", {"fields": [str(f) if isinstance(f, int) else f for f in fields]})

    def compute_commitment(
        self, recipient: str, amount: int, nonce: int, timestamp: int
    ) -> Dict[str, Any]:
        return self._post(
            "/commitment",
            {"recipient": recipient, "amount": amount, "nonce": nonce, "timestamp": timestamp},
        )

    def health_check(self) -> bool:
        """
        Check if the verifier API is accessible.

        Returns:
            True if API is accessible, False otherwise
        """
        try:
            response = self.session.get(f"{self.base_url}/health", timeout=10)
            return response.status_code == 200
        except requests.RequestException:
            return False
