"""
Wire Codec and Dispatcher Tests

Tests for decoding encoded requests, rejecting malformed ones, the result
code mapping, and prover input file generation.
"""

import json
import os
import sys
import tempfile
import unittest

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from mmr_proofs.constants import LIMB_MASK, MAX_PATH_LENGTH, STARK_PRIME
from mmr_proofs.mmr import CompactDigest, VerificationRequest
from mmr_proofs.wire import (
    DecodeError,
    ResultCode,
    decode_and_verify,
    decode_request,
    encode_request,
    minimum_length,
    write_program_inputs,
)

from mmr_fixtures import WIDE, COMPACT, build_mmr


class TestEncodeDecode(unittest.TestCase):

    def test_compact_layout(self):
        request = VerificationRequest(
            mode=COMPACT,
            root=CompactDigest(7),
            leaf=CompactDigest(5),
            leaf_index=0,
            mmr_size=1,
            peaks=(CompactDigest(9),),
        )
        encoded = encode_request(request)
        self.assertEqual(encoded, [2, 7, 5, 0, 1, 0, 1, 9])
        self.assertEqual(decode_request(encoded), request)

    def test_wide_layout_is_high_limb_first(self):
        mmr = build_mmr(WIDE, 3)
        request = mmr.proof(1)
        encoded = encode_request(request)
        self.assertEqual(encoded[0], 1)
        self.assertEqual(encoded[1:3], [mmr.root.high, mmr.root.low])
        self.assertEqual(encoded[5:7], [1, 3])
        self.assertEqual(decode_request(encoded), request)

    def test_decode_and_verify(self):
        for mode in (WIDE, COMPACT):
            mmr = build_mmr(mode, 6)
            encoded = encode_request(mmr.proof(5))
            self.assertIs(decode_and_verify(encoded), ResultCode.VALID)
            encoded[-1] ^= 1
            self.assertIs(decode_and_verify(encoded), ResultCode.INVALID)

    def test_minimum_length(self):
        self.assertEqual(minimum_length(1), 7)
        self.assertEqual(minimum_length(2), 9)


class TestDecodeRobustness(unittest.TestCase):
    """Malformed requests raise DecodeError instead of verifying partial data."""

    def setUp(self):
        self.mmr = build_mmr(COMPACT, 5)
        self.encoded = encode_request(self.mmr.proof(0))

    def assertDecodeError(self, raw):
        with self.assertRaises(DecodeError):
            decode_request(raw)

    def test_empty_and_unknown_mode(self):
        self.assertDecodeError([])
        self.assertDecodeError([0, 1, 2, 3, 4, 5, 6])
        self.assertDecodeError([3] + self.encoded[1:])

    def test_too_short(self):
        self.assertDecodeError([2, 1, 2, 0, 1])
        self.assertDecodeError([1, 0, 0, 0, 0, 0, 1, 0])

    def test_overstated_sibling_count(self):
        raw = list(self.encoded)
        raw[5] = 1000
        self.assertDecodeError(raw)
        raw[5] = MAX_PATH_LENGTH + 1
        self.assertDecodeError(raw)
        raw[5] = self.encoded[5] + 1
        self.assertDecodeError(raw)

    def test_peak_count_mismatch(self):
        self.assertDecodeError(self.encoded + [0])
        self.assertDecodeError(self.encoded[:-1])
        raw = list(self.encoded)
        raw[-3] += 1
        self.assertDecodeError(raw)

    def test_values_outside_field_or_width(self):
        self.assertDecodeError(self.encoded[:1] + [STARK_PRIME] + self.encoded[2:])
        self.assertDecodeError(self.encoded[:3] + [2**64] + self.encoded[4:])
        self.assertDecodeError(self.encoded[:1] + [-1] + self.encoded[2:])

    def test_wide_limb_overflow(self):
        encoded = encode_request(build_mmr(WIDE, 1).proof(0))
        encoded[1] = LIMB_MASK + 1
        self.assertDecodeError(encoded)

    def test_non_integer_slots(self):
        self.assertDecodeError(["2"] + self.encoded[1:])
        self.assertDecodeError([True] + self.encoded[1:])

    def test_decode_error_is_value_error(self):
        self.assertTrue(issubclass(DecodeError, ValueError))


class TestSchemeIsolation(unittest.TestCase):
    """A request encoded under one scheme never verifies under the other."""

    def test_swapped_mode(self):
        for source, target in ((WIDE, COMPACT), (COMPACT, WIDE)):
            encoded = encode_request(build_mmr(source, 4).proof(2))
            encoded[0] = int(target)
            try:
                result = decode_and_verify(encoded)
            except DecodeError:
                continue
            self.assertIs(result, ResultCode.INVALID)


class TestProgramInputs(unittest.TestCase):

    def test_write_program_inputs(self):
        encoded = encode_request(build_mmr(COMPACT, 2).proof(1))
        with tempfile.TemporaryDirectory() as tmp:
            json_path, txt_path = write_program_inputs(encoded, os.path.join(tmp, "out"))
            with open(json_path) as f:
                self.assertEqual(json.load(f), [encoded])
            with open(txt_path) as f:
                self.assertEqual(f.read(), " ".join(str(v) for v in encoded))

    def test_malformed_input_not_written(self):
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(DecodeError):
                write_program_inputs([2, 1], tmp)
            self.assertEqual(os.listdir(tmp), [])


if __name__ == '__main__':
    unittest.main()
