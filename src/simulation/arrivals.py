from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List

from .passenger import Passenger


class ArrivalIndex:
    """Passenger ids keyed by the tick at which they show up on their floor."""

    def __init__(self, passengers: Iterable[Passenger] = ()) -> None:
        self._by_tick: Dict[int, List[int]] = defaultdict(list)
        for passenger in passengers:
            self.add(passenger)

    def add(self, passenger: Passenger) -> None:
        self._by_tick[passenger.appear_tick].append(passenger.passenger_id)

    def release(self, tick: int) -> List[int]:
        # Drained ticks are never refilled.
        return self._by_tick.pop(tick, [])
