"""
Unit tests for pattern enumeration in patterns.py.

Covers:
- Pruning at bar length and the per-length cut cap.
- Generation order (multiplicity 0 first at every depth).
- Agreement with a brute-force enumeration.
- The pattern-count guardrail.
"""
from __future__ import annotations

import itertools
import unittest

from cut_errors import PatternLimitExceeded
from patterns import generate_patterns, pattern_used_length


def _brute_force(cut_types, bar_length, max_cuts):
    """All non-empty feasible patterns, lexicographic order."""
    out = []
    for combo in itertools.product(range(max_cuts + 1), repeat=len(cut_types)):
        if any(combo) and pattern_used_length(combo, cut_types) <= bar_length:
            out.append(combo)
    return out


class TestGeneratePatterns(unittest.TestCase):
    def test_single_length_fills_bar_exactly(self) -> None:
        patterns = generate_patterns([20000], 160000, 10)
        self.assertEqual(patterns, [(k,) for k in range(1, 9)])

    def test_cut_cap_limits_short_lengths(self) -> None:
        # 16 pieces of 10 fit by length; the cap stops at 10
        patterns = generate_patterns([10000], 160000, 10)
        self.assertEqual(patterns[-1], (10,))
        self.assertEqual(len(patterns), 10)

    def test_two_lengths_in_depth_first_order(self) -> None:
        patterns = generate_patterns([50000, 30000], 100000, 10)
        self.assertEqual(patterns, [(0, 1), (0, 2), (0, 3), (1, 0), (1, 1), (2, 0)])

    def test_matches_brute_force(self) -> None:
        cut_types = [20000, 45500, 10000, 37125]
        self.assertEqual(
            generate_patterns(cut_types, 160000, 10),
            _brute_force(cut_types, 160000, 10),
        )

    def test_every_pattern_fits_bar_and_cap(self) -> None:
        cut_types = [45500, 37125, 80000]
        for pattern in generate_patterns(cut_types, 160000, 3):
            self.assertTrue(any(pattern))
            self.assertLessEqual(pattern_used_length(pattern, cut_types), 160000)
            self.assertTrue(all(0 <= c <= 3 for c in pattern))

    def test_no_cut_types(self) -> None:
        self.assertEqual(generate_patterns([], 160000, 10), [])

    def test_length_longer_than_bar_yields_nothing(self) -> None:
        self.assertEqual(generate_patterns([170000], 160000, 10), [])

    def test_pattern_limit(self) -> None:
        with self.assertRaises(PatternLimitExceeded) as ctx:
            generate_patterns([10000], 160000, 10, max_patterns=5, material="B")
        self.assertEqual(ctx.exception.material, "B")
        self.assertEqual(ctx.exception.limit, 5)
        # exactly at the limit is fine
        self.assertEqual(len(generate_patterns([10000], 160000, 10, max_patterns=10)), 10)


if __name__ == "__main__":
    unittest.main()
