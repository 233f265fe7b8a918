from __future__ import annotations

import math

BASE_TICKS_PER_FLOOR = 3
LOAD_PENALTY_TICKS = 5


def ticks_per_floor(load: float, max_load: float) -> int:
    """Ticks needed to cross one floor; heavier cars are slower."""

    return BASE_TICKS_PER_FLOOR + math.floor(LOAD_PENALTY_TICKS * load / max_load)


def travel_time(distance: int, load: float, max_load: float) -> int:
    return abs(distance) * ticks_per_floor(load, max_load)


def round_half_away(value: float) -> int:
    # Python's round() is banker's rounding; floors need 2.5 -> 3.
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def interpolate_floor(
    start_floor: int, target_floor: int, start_tick: int, end_tick: int, now: int
) -> int:
    """Estimate where a moving car is by linear interpolation over its leg.

    The car is only known to have left ``start_floor`` at ``start_tick`` and
    to reach ``target_floor`` at ``end_tick``. A zero-length leg counts as
    already arrived.
    """

    if end_tick <= start_tick:
        fraction = 1.0
    else:
        fraction = (now - start_tick) / (end_tick - start_tick)
        fraction = min(1.0, max(0.0, fraction))
    return start_floor + round_half_away(fraction * (target_floor - start_floor))
