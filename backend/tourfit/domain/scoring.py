from __future__ import annotations

import math

from .errors import InvalidConfiguration
from .models import RouteFit

# Outer edge of "worth considering"; independent of the ranker's search floor
DISTANCE_CAP_MILES = 200.0
DETOUR_CAP_MILES = 200.0
MAX_PENALTY = 100

DISTANCE_WEIGHT = 1.5
DETOUR_WEIGHT = 1.2
DAYS_WEIGHT = 0.8

DAYS_PENALTY = {
    1: 10,
    2: 0,
    3: 10,
    4: 30,
    5: 50,
}
DAYS_PENALTY_STEP = 10


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def distance_penalty(distance_to_venue: float) -> int:
    if distance_to_venue > DISTANCE_CAP_MILES:
        return MAX_PENALTY
    return _round_half_up(distance_to_venue / DISTANCE_CAP_MILES * 100)


def detour_penalty(extra_distance: float, distance_to_venue: float) -> int:
    max_acceptable = min(distance_to_venue * 2, DETOUR_CAP_MILES)
    if max_acceptable <= 0:
        return MAX_PENALTY if extra_distance > 0 else 0
    if extra_distance > max_acceptable:
        return MAX_PENALTY
    # negative overhead means the venue sits on the direct path
    return max(0, _round_half_up(extra_distance / max_acceptable * 100))


def days_penalty(days_between: int) -> int:
    if days_between < 1:
        raise InvalidConfiguration(f"days_between must be >= 1, got {days_between}")
    if days_between in DAYS_PENALTY:
        return DAYS_PENALTY[days_between]
    return DAYS_PENALTY[5] + (days_between - 5) * DAYS_PENALTY_STEP


def routing_score(distance_to_venue: float, extra_distance: float, days_between: int) -> float:
    """Composite routing score, lower is better.

    Distance to the route dominates, the extra driving comes next and the
    day-fit weighs least.
    """
    return (
        distance_penalty(distance_to_venue) * DISTANCE_WEIGHT
        + detour_penalty(extra_distance, distance_to_venue) * DETOUR_WEIGHT
        + days_penalty(days_between) * DAYS_WEIGHT
    )


def score(fit: RouteFit, search_radius: float) -> float:
    if search_radius < 0:
        raise InvalidConfiguration(f"search_radius must be >= 0, got {search_radius}")
    return routing_score(fit.distance_to_venue, fit.extra_distance, fit.days_available)
