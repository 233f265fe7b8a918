from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .elevator import ElevatorState
from .errors import ConfigError

DEFAULT_STARTING_FLOOR = 1


@dataclass
class BuildingConfig:
    """Floors and per-elevator capacities read from the building file."""

    floors_count: int
    max_loads: List[float] = field(default_factory=list)

    @property
    def elevators_count(self) -> int:
        return len(self.max_loads)

    @property
    def largest_max_load(self) -> float:
        return max(self.max_loads) if self.max_loads else 0.0

    def validate(self) -> None:
        if self.floors_count <= 0:
            raise ConfigError("Number of floors must be positive")
        if not self.max_loads:
            raise ConfigError("Number of elevators must be positive")
        for elevator_id, max_load in enumerate(self.max_loads, start=1):
            if max_load <= 0:
                raise ConfigError(
                    f"Invalid max_load for elevator {elevator_id}: must be positive (got {max_load:g})"
                )


@dataclass
class SimulationOptions:
    """Knobs that are not part of the building file."""

    starting_floor: int = DEFAULT_STARTING_FLOOR
    initial_state: ElevatorState = ElevatorState.IDLE_CLOSED
    selector: str = "nearest_suitable"
    target_policy: str = "scan"

    def validate(self, config: BuildingConfig) -> None:
        if not 1 <= self.starting_floor <= config.floors_count:
            raise ConfigError(
                f"Starting floor {self.starting_floor} outside 1..{config.floors_count}"
            )
        if self.initial_state.is_moving:
            raise ConfigError("Elevators must start in an idle state")