"""
Runtime Configuration

Settings are read from the environment (and a .env file, if present) once
per call to get_settings(). The verifier core never reads configuration
itself; the service layer and the CLI pass the resolved options in.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict

from dotenv import load_dotenv

from .mmr.peaks import ParityConvention
from .mmr.verify import PeakMatchMode

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_API_HOST = "127.0.0.1"
DEFAULT_API_PORT = 8000


@dataclass(frozen=True)
class Settings:
    """
    Resolved runtime settings.

    Attributes:
        peak_match: Peak matching mode passed to the verifier
        convention: Parity convention passed to the verifier
        relax_peak_count_below: Compact-scheme peak count relaxation threshold
        api_host: Host the REST API binds to
        api_port: Port the REST API binds to
        api_url: Base URL used by the API client
    """
    peak_match: PeakMatchMode = PeakMatchMode.POSITIONAL
    convention: ParityConvention = ParityConvention.ODD_IS_LEFT
    relax_peak_count_below: int = 0
    api_host: str = DEFAULT_API_HOST
    api_port: int = DEFAULT_API_PORT
    api_url: str = f"http://{DEFAULT_API_HOST}:{DEFAULT_API_PORT}"

    def verifier_options(self) -> Dict[str, Any]:
        """Keyword options for mmr_proofs.mmr.verify / explain."""
        return {
            "peak_match": self.peak_match,
            "convention": self.convention,
            "relax_peak_count_below": self.relax_peak_count_below,
        }


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def get_settings() -> Settings:
    """
    Build Settings from environment variables.

    Raises:
        ValueError: If a variable holds an unsupported value
    """
    peak_match = os.getenv("MMR_PROOFS_PEAK_MATCH", PeakMatchMode.POSITIONAL.value)
    convention = os.getenv("MMR_PROOFS_PARITY", ParityConvention.ODD_IS_LEFT.value)
    host = os.getenv("MMR_PROOFS_API_HOST", DEFAULT_API_HOST)
    port = _int_env("MMR_PROOFS_API_PORT", DEFAULT_API_PORT)

    try:
        settings = Settings(
            peak_match=PeakMatchMode(peak_match.lower()),
            convention=ParityConvention(convention.lower()),
            relax_peak_count_below=_int_env("MMR_PROOFS_RELAX_PEAK_COUNT_BELOW", 0),
            api_host=host,
            api_port=port,
            api_url=os.getenv("MMR_PROOFS_API_URL", f"http://{host}:{port}"),
        )
    except ValueError as e:
        raise ValueError(f"Invalid MMR proofs configuration: {e}") from None

    if settings.peak_match is PeakMatchMode.ANYWHERE:
        logger.warning("Legacy anywhere peak matching is enabled")
    return settings
