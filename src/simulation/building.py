from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from .config import BuildingConfig, SimulationOptions
from .elevator import Elevator
from .errors import ContractViolation
from .floor import Floor


@dataclass
class Building:
    """Container for floors and elevators; floors are numbered from 1."""

    floors_count: int
    elevators: List[Elevator] = field(default_factory=list)
    floors: List[Floor] = field(init=False)

    def __post_init__(self) -> None:
        if self.floors_count <= 0:
            raise ContractViolation("Building needs at least one floor")
        self.floors = [Floor(i) for i in range(1, self.floors_count + 1)]

    @classmethod
    def from_config(
        cls, config: BuildingConfig, options: Optional[SimulationOptions] = None
    ) -> "Building":
        options = options or SimulationOptions()
        config.validate()
        options.validate(config)
        elevators = [
            Elevator(
                elevator_id=index,
                max_load=max_load,
                floors_count=config.floors_count,
                current_floor=options.starting_floor,
                state=options.initial_state,
            )
            for index, max_load in enumerate(config.max_loads, start=1)
        ]
        return cls(floors_count=config.floors_count, elevators=elevators)

    def contains_floor(self, floor_number: int) -> bool:
        return 1 <= floor_number <= self.floors_count

    def get_floor(self, floor_number: int) -> Floor:
        if not self.contains_floor(floor_number):
            raise ContractViolation(f"Invalid floor number {floor_number}")
        return self.floors[floor_number - 1]

    def get_elevator(self, elevator_id: int) -> Optional[Elevator]:
        for elevator in self.elevators:
            if elevator.elevator_id == elevator_id:
                return elevator
        return None

    def waiting_floors(self) -> Iterator[Floor]:
        return (floor for floor in self.floors if floor.has_waiting())

    def snapshot(self) -> dict:
        return {
            "floors": [len(floor) for floor in self.floors],
            "elevators": [
                {
                    "id": elevator.elevator_id,
                    "floor": elevator.current_floor,
                    "target": elevator.target_floor,
                    "state": elevator.state.value,
                    "load": elevator.current_load,
                    "passenger_count": len(elevator.onboard),
                }
                for elevator in self.elevators
            ],
        }
