from __future__ import annotations

import math
from typing import Callable

from ..exceptions import UnknownScoringStrategyError

Scorer = Callable[[float, float, float], float]

# Returned when a species has no usable range for a factor.
NEUTRAL_SCORE = 0.3
# In-range scores never drop below this at the range edges.
EDGE_SCORE = 0.8
MIN_OUTSIDE_TOLERANCE = 5.0


def _is_degenerate(low: float, high: float) -> bool:
    return low == 0 and high == 0


def _outside_distance(value: float, low: float, high: float) -> float:
    return low - value if value < low else value - high


def _outside_tolerance(low: float, high: float) -> float:
    return max((high - low) * 0.8, MIN_OUTSIDE_TOLERANCE)


def tapered_score(value: float, low: float, high: float) -> float:
    """
    Score how well ``value`` fits the tolerance range ``[low, high]``.

    In range: 1.0 at the centre tapering linearly to 0.8 at the edges.
    Out of range: exponential decay with distance from the nearest bound.
    """
    if _is_degenerate(low, high):
        return NEUTRAL_SCORE
    if not all(math.isfinite(x) for x in (value, low, high)):
        return 0.0

    if low <= value <= high:
        range_size = high - low
        if range_size == 0:
            return 1.0
        center = (low + high) / 2
        return max(EDGE_SCORE, 1.0 - abs(value - center) / range_size * 0.2)

    distance = _outside_distance(value, low, high)
    score = math.exp(-distance / _outside_tolerance(low, high))
    return max(0.0, min(1.0, score))


def linear_score(value: float, low: float, high: float) -> float:
    """Flat 1.0 in range; linear decay to 0 outside it."""
    if _is_degenerate(low, high):
        return NEUTRAL_SCORE
    if not all(math.isfinite(x) for x in (value, low, high)):
        return 0.0

    if low <= value <= high:
        return 1.0

    distance = _outside_distance(value, low, high)
    return max(0.0, 1.0 - distance / _outside_tolerance(low, high))


score = tapered_score

SCORING_STRATEGIES: dict[str, Scorer] = {
    "tapered": tapered_score,
    "linear": linear_score,
}


def get_scorer(name: str) -> Scorer:
    """Look up a scoring strategy by its configured name."""
    try:
        return SCORING_STRATEGIES[name.strip().lower()]
    except KeyError:
        raise UnknownScoringStrategyError(name, sorted(SCORING_STRATEGIES)) from None
