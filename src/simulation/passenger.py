from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Set


@dataclass
class Passenger:
    """A scheduled trip plus the progress recorded while it is served."""

    passenger_id: int
    appear_tick: int
    origin: int
    destination: int
    weight: float
    board_tick: Optional[int] = None
    alight_tick: Optional[int] = None
    overloaded_once: bool = False
    met_passengers: Set[int] = field(default_factory=set)

    @property
    def delivered(self) -> bool:
        return self.alight_tick is not None

    def record_boarding(self, time_step: int) -> None:
        self.board_tick = time_step

    def record_alighting(self, time_step: int) -> None:
        self.alight_tick = time_step

    def mark_overloaded(self) -> None:
        self.overloaded_once = True

    def meet(self, other: "Passenger") -> None:
        # Both riders record the encounter.
        if other.passenger_id == self.passenger_id:
            return
        self.met_passengers.add(other.passenger_id)
        other.met_passengers.add(self.passenger_id)

    @property
    def ride_time(self) -> Optional[int]:
        if self.board_tick is None or self.alight_tick is None:
            return None
        return self.alight_tick - self.board_tick
