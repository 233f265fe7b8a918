from __future__ import annotations

from typing import Iterable, Optional, Tuple

from .interface import ElevatorSnapshot, FloorCall


class NearestSuitableSelector:
    """Picks the closest elevator that can still stop at the calling floor.

    Idle cars beat moving ones; a moving car qualifies only while the call
    lies ahead of it (or level with it) in its direction of travel. Cars
    that could not admit even the lightest waiting rider are skipped.
    """

    def select(
        self,
        elevator_state: Iterable[ElevatorSnapshot],
        call: FloorCall,
    ) -> Optional[int]:
        best: Optional[ElevatorSnapshot] = None
        best_key: Optional[Tuple[int, int]] = None
        for elevator in elevator_state:
            if not self._is_suitable(elevator, call):
                continue
            key = (0 if elevator.idle else 1, abs(elevator.position - call.floor))
            # Strict comparison keeps the earliest elevator on ties.
            if best_key is None or key < best_key:
                best, best_key = elevator, key
        return best.elevator_id if best is not None else None

    def _is_suitable(self, elevator: ElevatorSnapshot, call: FloorCall) -> bool:
        if not elevator.can_admit(call.lightest):
            return False
        if elevator.idle:
            return True
        return (elevator.direction > 0 and elevator.position <= call.floor) or (
            elevator.direction < 0 and elevator.position >= call.floor
        )
