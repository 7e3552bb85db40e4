"""
Turn pattern usage counts into bounded production rounds.
"""
from __future__ import annotations

import math
from typing import Iterator, List, Sequence, Tuple

from datatypes import CutEntry, OptimizedRound
from demand import from_thousandths
from patterns import Pattern, pattern_used_length


def pattern_entries(pattern: Pattern, cut_types: Sequence[int]) -> Tuple[CutEntry, ...]:
    """Non-zero (length, count) pairs of a pattern, in cut-type order."""
    return tuple(
        CutEntry(length=from_thousandths(length), count=count)
        for count, length in zip(pattern, cut_types)
        if count > 0
    )


def split_bars(total_bars: int, max_bars_per_round: int) -> List[int]:
    """14 bars with a cap of 6 -> [6, 6, 2]."""
    sizes = []
    remaining = total_bars
    while remaining > 0:
        take = min(remaining, max_bars_per_round)
        sizes.append(take)
        remaining -= take
    return sizes


def split_into_rounds(
    material: str,
    cut_types: Sequence[int],
    pattern: Pattern,
    usage: float,
    bar_length: int,
    max_bars_per_round: int,
    counter: Iterator[int],
) -> List[OptimizedRound]:
    """Rounds for one used pattern.

    Args:
        material: Owning material label.
        cut_types: Lengths (thousandths) aligned with ``pattern``.
        pattern: Multiplicities per cut type.
        usage: Bars of this pattern reported by the solver; rounded up.
        bar_length: Bar length (thousandths).
        max_bars_per_round: Cap on bars per round.
        counter: Shared round-number source (``itertools.count(1)``).

    Returns:
        Consecutive rounds, all but the last holding ``max_bars_per_round`` bars.
    """
    waste = bar_length - pattern_used_length(pattern, cut_types)
    if waste < 0:
        raise ValueError(f"pattern {pattern} overruns bar length {from_thousandths(bar_length)}")
    entries = pattern_entries(pattern, cut_types)
    waste_per_bar = from_thousandths(waste)
    return [
        OptimizedRound(
            round=next(counter),
            bars=bars,
            pattern=entries,
            waste_per_bar=waste_per_bar,
            material=material,
        )
        for bars in split_bars(math.ceil(usage), max_bars_per_round)
    ]
