"""
Unit tests for round splitting in rounds.py.

Covers:
- Splitting bar counts into capped rounds.
- Waste per bar with exact fixed-point arithmetic.
- Ceiling of fractional usage.
- Round numbers continuing across calls through a shared counter.
"""
from __future__ import annotations

import itertools
import unittest
from decimal import Decimal

from datatypes import CutEntry
from rounds import pattern_entries, split_bars, split_into_rounds


class TestSplitBars(unittest.TestCase):
    def test_remainder_goes_last(self) -> None:
        self.assertEqual(split_bars(14, 6), [6, 6, 2])

    def test_exact_multiple(self) -> None:
        self.assertEqual(split_bars(12, 6), [6, 6])

    def test_under_cap(self) -> None:
        self.assertEqual(split_bars(1, 6), [1])

    def test_zero(self) -> None:
        self.assertEqual(split_bars(0, 6), [])


class TestSplitIntoRounds(unittest.TestCase):
    def test_fourteen_bars(self) -> None:
        counter = itertools.count(1)
        rounds = split_into_rounds("A", [20000], (8,), 14, 160000, 6, counter)
        self.assertEqual([r.round for r in rounds], [1, 2, 3])
        self.assertEqual([r.bars for r in rounds], [6, 6, 2])
        for r in rounds:
            self.assertEqual(r.material, "A")
            self.assertEqual(r.pattern, (CutEntry(Decimal("20.000"), 8),))
            self.assertEqual(r.waste_per_bar, Decimal("0.000"))

    def test_waste_is_exact(self) -> None:
        rounds = split_into_rounds("B", [45500, 37125], (1, 2), 1, 160000, 6, itertools.count(1))
        self.assertEqual(len(rounds), 1)
        self.assertEqual(rounds[0].waste_per_bar, Decimal("40.250"))
        self.assertEqual(rounds[0].used_length, Decimal("119.750"))
        self.assertEqual(rounds[0].used_length + rounds[0].waste_per_bar, Decimal("160.000"))

    def test_zero_multiplicities_are_dropped(self) -> None:
        entries = pattern_entries((0, 3, 0, 1), [10000, 20000, 30000, 40000])
        self.assertEqual(entries, (CutEntry(Decimal("20.000"), 3), CutEntry(Decimal("40.000"), 1)))

    def test_fractional_usage_rounds_up(self) -> None:
        rounds = split_into_rounds("A", [20000], (8,), 2.2, 160000, 6, itertools.count(1))
        self.assertEqual(sum(r.bars for r in rounds), 3)

    def test_counter_shared_between_patterns(self) -> None:
        counter = itertools.count(1)
        first = split_into_rounds("A", [20000], (8,), 7, 160000, 6, counter)
        second = split_into_rounds("B", [10000], (10,), 2, 160000, 6, counter)
        self.assertEqual([r.round for r in first + second], [1, 2, 3])

    def test_overrun_pattern_rejected(self) -> None:
        with self.assertRaises(ValueError):
            split_into_rounds("A", [20000], (9,), 1, 160000, 6, itertools.count(1))

    def test_round_serializes(self) -> None:
        r = split_into_rounds("A", [45500], (3,), 2, 160000, 6, itertools.count(5))[0]
        self.assertEqual(r.to_record(), {
            "round": 5,
            "bars": 2,
            "pattern": [{"length": 45.5, "count": 3}],
            "wastePerBar": 23.5,
            "material": "A",
        })
        self.assertEqual(r.total_waste, Decimal("47.000"))
        self.assertEqual(r.cuts_of(Decimal("45.5")), 6)


if __name__ == "__main__":
    unittest.main()
