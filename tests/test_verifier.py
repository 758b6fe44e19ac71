"""
Proof Verifier Tests

Round-trip, tamper sensitivity and structural checks for the MMR inclusion
proof verifier, under both hash schemes and both parity conventions.
"""

import unittest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from mmr_proofs.mmr import (
    CompactDigest,
    ParityConvention,
    PeakMatchMode,
    SchemeMismatchError,
    VerificationRequest,
    WideDigest,
    compute_root,
    explain,
    get_scheme,
    verify,
)

from mmr_fixtures import WIDE, COMPACT, ReferenceMMR, build_mmr, flip


class TestRoundTrip(unittest.TestCase):
    """Every leaf of every structure size verifies."""

    def test_all_leaves_both_schemes(self):
        for mode in (WIDE, COMPACT):
            for size in range(1, 17):
                mmr = build_mmr(mode, size)
                for index in range(size):
                    with self.subTest(mode=mode, size=size, index=index):
                        self.assertTrue(verify(mmr.proof(index)))

    def test_even_is_left_convention(self):
        mmr = build_mmr(COMPACT, 7)
        for index in range(mmr.size):
            self.assertTrue(
                verify(mmr.proof(index), convention=ParityConvention.EVEN_IS_LEFT)
            )

    def test_expected_leaf(self):
        mmr = build_mmr(WIDE, 5)
        self.assertTrue(verify(mmr.proof(2), mmr.leaves[2]))
        outcome = explain(mmr.proof(2), mmr.leaves[3])
        self.assertFalse(outcome)
        self.assertIn("expected leaf", outcome.reason)


class TestSmallStructures(unittest.TestCase):

    def test_single_element(self):
        for mode in (WIDE, COMPACT):
            scheme = get_scheme(mode)
            leaf = scheme.digest_type.from_int(42)
            peak = scheme.hash_leaf(leaf)
            request = VerificationRequest(
                mode=mode,
                root=scheme.combine_pair(scheme.embed_scalar(1), peak),
                leaf=leaf,
                leaf_index=0,
                mmr_size=1,
                peaks=(peak,),
            )
            self.assertTrue(verify(request))
            # A non-empty path is rejected for a height-0 mountain
            self.assertFalse(verify(VerificationRequest(
                mode=mode, root=request.root, leaf=leaf, leaf_index=0,
                mmr_size=1, siblings=(peak,), peaks=(peak,),
            )))

    def test_two_leaf_structure(self):
        leaves = [WideDigest.from_int(10), WideDigest.from_int(20)]
        mmr = ReferenceMMR(WIDE, leaves)
        scheme = mmr.scheme
        self.assertEqual(
            mmr.peaks,
            [scheme.combine_pair(scheme.hash_leaf(leaves[0]), scheme.hash_leaf(leaves[1]))],
        )
        self.assertTrue(verify(mmr.proof(0)))
        self.assertTrue(verify(mmr.proof(1)))
        # Swapping the leaves breaks the left/right order
        self.assertFalse(verify(mmr.proof(0, leaf=leaves[1], siblings=(scheme.hash_leaf(leaves[0]),))))


class TestTamper(unittest.TestCase):
    """Changing any single input rejects the proof."""

    def setUp(self):
        self.mmrs = [build_mmr(WIDE, 11), build_mmr(COMPACT, 11)]

    def test_tampered_leaf(self):
        for mmr in self.mmrs:
            self.assertFalse(verify(mmr.proof(4, leaf=flip(mmr.leaves[4]))))

    def test_tampered_sibling(self):
        for mmr in self.mmrs:
            for position in range(3):
                siblings = list(mmr.siblings(4))
                siblings[position] = flip(siblings[position])
                self.assertFalse(verify(mmr.proof(4, siblings=tuple(siblings))))

    def test_tampered_peak(self):
        for mmr in self.mmrs:
            for position in range(len(mmr.peaks)):
                peaks = list(mmr.peaks)
                peaks[position] = flip(peaks[position])
                self.assertFalse(verify(mmr.proof(9, peaks=tuple(peaks))))

    def test_tampered_root(self):
        for mmr in self.mmrs:
            outcome = explain(mmr.proof(0, root=flip(mmr.root)))
            self.assertFalse(outcome)
            self.assertIn("root", outcome.reason)

    def test_wrong_size(self):
        for mmr in self.mmrs:
            self.assertFalse(verify(mmr.proof(0, mmr_size=12)))


class TestStructuralChecks(unittest.TestCase):

    def test_leaf_index_out_of_range(self):
        mmr = build_mmr(COMPACT, 3)
        self.assertFalse(verify(mmr.proof(2, leaf_index=3)))

    def test_short_and_long_paths(self):
        mmr = build_mmr(WIDE, 8)
        siblings = mmr.siblings(0)
        self.assertFalse(verify(mmr.proof(0, siblings=tuple(siblings[:-1]))))
        self.assertFalse(verify(mmr.proof(0, siblings=tuple(siblings) + (siblings[0],))))

    def test_wrong_peak_count(self):
        mmr = build_mmr(COMPACT, 3)
        outcome = explain(mmr.proof(0, peaks=mmr.peaks[:1]))
        self.assertFalse(outcome)
        self.assertIn("peaks", outcome.reason)

    def test_relaxed_peak_count_for_compact_scheme(self):
        # Two leaves committed as a single-peak structure under a size of 3
        mmr = build_mmr(COMPACT, 2)
        scheme = mmr.scheme
        root = compute_root(mmr.peaks, 3, scheme)
        request = mmr.proof(0, mmr_size=3, root=root)
        self.assertFalse(verify(request))
        # Peak count relaxed; the leaf still lands in the first mountain
        self.assertTrue(verify(request, relax_peak_count_below=4))

    def test_relaxation_never_applies_to_wide_scheme(self):
        mmr = build_mmr(WIDE, 2)
        root = compute_root(mmr.peaks, 3, mmr.scheme)
        self.assertFalse(verify(mmr.proof(0, mmr_size=3, root=root), relax_peak_count_below=4))


class TestPeakMatchModes(unittest.TestCase):

    def test_anywhere_accepts_peak_at_other_position(self):
        mmr = build_mmr(COMPACT, 3)
        # Reverse the peak set and recommit it; the leaf's peak is now at position 1
        peaks = tuple(reversed(mmr.peaks))
        root = compute_root(peaks, mmr.size, mmr.scheme)
        request = mmr.proof(0, peaks=peaks, root=root)

        self.assertFalse(verify(request))
        self.assertFalse(verify(request, peak_match=PeakMatchMode.POSITIONAL))
        self.assertTrue(verify(request, peak_match=PeakMatchMode.ANYWHERE))


class TestRequestValidation(unittest.TestCase):

    def test_mixed_schemes_rejected(self):
        mmr = build_mmr(WIDE, 2)
        with self.assertRaises(SchemeMismatchError):
            mmr.proof(0, root=CompactDigest(1))
        with self.assertRaises(SchemeMismatchError):
            mmr.proof(0, mode=COMPACT)

    def test_integer_fields_must_fit_u64(self):
        mmr = build_mmr(COMPACT, 1)
        with self.assertRaises(ValueError):
            mmr.proof(0, mmr_size=2**64)
        with self.assertRaises(ValueError):
            mmr.proof(0, leaf_index=-1)
        with self.assertRaises(ValueError):
            mmr.proof(0, leaf_index=True)

    def test_unknown_mode(self):
        mmr = build_mmr(COMPACT, 1)
        with self.assertRaises(ValueError):
            mmr.proof(0, mode=3)


if __name__ == '__main__':
    unittest.main()
