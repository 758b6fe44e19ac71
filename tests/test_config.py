"""
Configuration Tests

Tests for reading runtime settings from the environment.
"""

import os
import sys
import unittest
from unittest import mock

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from mmr_proofs.config import DEFAULT_API_HOST, DEFAULT_API_PORT, Settings, get_settings
from mmr_proofs.mmr import ParityConvention, PeakMatchMode


class TestGetSettings(unittest.TestCase):

    @mock.patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        settings = get_settings()
        self.assertEqual(settings, Settings())
        self.assertIs(settings.peak_match, PeakMatchMode.POSITIONAL)
        self.assertIs(settings.convention, ParityConvention.ODD_IS_LEFT)
        self.assertEqual(settings.relax_peak_count_below, 0)
        self.assertEqual(settings.api_url, f"http://{DEFAULT_API_HOST}:{DEFAULT_API_PORT}")

    @mock.patch.dict(os.environ, {
        "MMR_PROOFS_PARITY": "even-is-left",
        "MMR_PROOFS_RELAX_PEAK_COUNT_BELOW": "8",
        "MMR_PROOFS_API_HOST": "0.0.0.0",
        "MMR_PROOFS_API_PORT": "9000",
    }, clear=True)
    def test_reads_environment(self):
        settings = get_settings()
        self.assertIs(settings.convention, ParityConvention.EVEN_IS_LEFT)
        self.assertEqual(settings.relax_peak_count_below, 8)
        self.assertEqual(settings.api_port, 9000)
        self.assertEqual(settings.api_url, "http://0.0.0.0:9000")
        self.assertEqual(
            settings.verifier_options(),
            {
                "peak_match": PeakMatchMode.POSITIONAL,
                "convention": ParityConvention.EVEN_IS_LEFT,
                "relax_peak_count_below": 8,
            },
        )

    @mock.patch.dict(os.environ, {"MMR_PROOFS_API_URL": "http://verifier:8000"}, clear=True)
    def test_explicit_api_url(self):
        self.assertEqual(get_settings().api_url, "http://verifier:8000")

    @mock.patch.dict(os.environ, {"MMR_PROOFS_PEAK_MATCH": "ANYWHERE"}, clear=True)
    def test_legacy_anywhere_warns(self):
        with self.assertLogs("mmr_proofs.config", level="WARNING") as logs:
            settings = get_settings()
        self.assertIs(settings.peak_match, PeakMatchMode.ANYWHERE)
        self.assertIn("Legacy anywhere", logs.output[0])

    def test_rejects_bad_values(self):
        for name, value in (
            ("MMR_PROOFS_PEAK_MATCH", "sometimes"),
            ("MMR_PROOFS_PARITY", "left"),
            ("MMR_PROOFS_API_PORT", "eighty"),
            ("MMR_PROOFS_RELAX_PEAK_COUNT_BELOW", "1.5"),
        ):
            with self.subTest(name=name):
                with mock.patch.dict(os.environ, {name: value}, clear=True):
                    with self.assertRaises(ValueError):
                        get_settings()


if __name__ == '__main__':
    unittest.main()
