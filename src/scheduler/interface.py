from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Protocol, Sequence, Tuple


@dataclass(frozen=True)
class ElevatorSnapshot:
    """Lightweight view of an elevator for scheduling decisions."""

    elevator_id: int
    position: int
    direction: int
    idle: bool
    load: float
    max_load: float

    def can_admit(self, weight: float) -> bool:
        return self.load + weight <= self.max_load


@dataclass(frozen=True)
class FloorCall:
    """Representation of an unassigned floor call for selectors."""

    floor: int
    waiting_weights: Tuple[float, ...] = ()

    @property
    def lightest(self) -> float:
        return min(self.waiting_weights) if self.waiting_weights else 0.0


class ElevatorSelector(Protocol):
    """Strategy interface for choosing which elevator answers a floor call."""

    def select(
        self,
        elevator_state: Iterable[ElevatorSnapshot],
        call: FloorCall,
    ) -> Optional[int]:
        """
        Return the id of the elevator that should serve ``call``.

        ``None`` means no elevator is suitable right now; the caller keeps
        the call open and asks again on a later tick.
        """
        ...


class TargetPolicy(Protocol):
    """Strategy interface for picking an elevator's next stop."""

    def next_target(self, floor: int, direction: int, signals: Sequence[bool]) -> Optional[int]:
        """
        Return the next floor to travel to, or ``None`` to park.

        ``signals`` is indexed by floor number; index 0 is unused.
        """
        ...
