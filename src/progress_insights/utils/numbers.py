"""Numeric helpers shared by the metric calculations."""

import math
from typing import List, Sequence


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves going up, unlike Python's banker's ``round``.

    ``round_half_up(2.5) == 3`` and ``round_half_up(-2.5) == -2``.
    """
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def percentage(part: float, whole: float) -> int:
    """``part`` as a whole-number percentage of ``whole``; 0 when ``whole`` is 0."""
    if whole <= 0:
        return 0
    return int(round_half_up(part / whole * 100))


def apportion_percentages(parts: Sequence[int]) -> List[int]:
    """Whole-number shares of ``parts`` that add up to exactly 100.

    Uses the largest remainder method: every share is floored, then the
    points still missing go to the parts with the largest remainders, the
    earlier part winning a tie. All zeros when the parts sum to 0.
    """
    total = sum(parts)
    if total <= 0:
        return [0] * len(parts)

    shares = [part * 100 // total for part in parts]
    missing = 100 - sum(shares)
    by_remainder = sorted(range(len(parts)), key=lambda i: parts[i] * 100 % total, reverse=True)
    for index in by_remainder[:missing]:
        shares[index] += 1
    return [int(share) for share in shares]