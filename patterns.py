"""
Enumeration of single-bar cutting patterns.

A pattern is a tuple of multiplicities aligned with a material's cut types:
``(2, 0, 1)`` means two pieces of the first length and one of the third.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from cut_errors import PatternLimitExceeded

logger = logging.getLogger(__name__)

Pattern = Tuple[int, ...]


def generate_patterns(
    cut_types: Sequence[int],
    bar_length: int,
    max_cuts_per_bar: int,
    max_patterns: Optional[int] = None,
    material: str = "",
) -> List[Pattern]:
    """Enumerate every non-empty pattern that fits on one bar.

    Depth-first over cut types with an explicit stack. At each depth the
    multiplicity runs 0..max_cuts_per_bar and stops as soon as one more piece
    would overrun the bar; lengths are positive so no later branch can fit
    again. Children are pushed in reverse so patterns come out in the same
    order as a recursive search trying multiplicity 0 first.

    Args:
        cut_types: Distinct positive lengths (thousandths), in demand order.
        bar_length: Bar length (thousandths).
        max_cuts_per_bar: Cap on the multiplicity of any single cut type.
        max_patterns: Optional bound on the result size.
        material: Label used in the PatternLimitExceeded message.

    Returns:
        List of patterns in generation order; the all-zero pattern is excluded.

    Raises:
        PatternLimitExceeded: If more than ``max_patterns`` patterns exist.
    """
    n = len(cut_types)
    if n == 0:
        return []

    patterns: List[Pattern] = []
    stack: List[Tuple[int, Pattern, int]] = [(0, (), 0)]
    while stack:
        depth, prefix, total = stack.pop()
        if depth == n:
            if any(prefix):
                patterns.append(prefix)
                if max_patterns is not None and len(patterns) > max_patterns:
                    raise PatternLimitExceeded(material, max_patterns, n)
            continue
        length = cut_types[depth]
        children = []
        for count in range(max_cuts_per_bar + 1):
            nxt = total + count * length
            if nxt > bar_length:
                break
            children.append((depth + 1, prefix + (count,), nxt))
        stack.extend(reversed(children))

    logger.debug("material %r: %d patterns over %d cut types", material, len(patterns), n)
    return patterns


def pattern_used_length(pattern: Pattern, cut_types: Sequence[int]) -> int:
    return sum(count * length for count, length in zip(pattern, cut_types))
