from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Mapping

from scheduler import ElevatorSnapshot, interpolate_floor, travel_time

from .errors import ContractViolation
from .passenger import Passenger


class ElevatorState(str, Enum):
    IDLE_CLOSED = "IdleClosed"
    IDLE_OPEN = "IdleOpen"
    MOVING_UP = "MovingUp"
    MOVING_DOWN = "MovingDown"

    @property
    def is_moving(self) -> bool:
        return self in (ElevatorState.MOVING_UP, ElevatorState.MOVING_DOWN)

    @property
    def is_idle(self) -> bool:
        return not self.is_moving


@dataclass
class ElevatorStats:
    idle_ticks: int = 0
    moving_ticks: int = 0
    floors_passed: int = 0
    total_cargo: float = 0.0
    peak_load: float = 0.0
    overload_count: int = 0


@dataclass
class Elevator:
    """A car with load-dependent speed, door states and per-floor signals.

    Drop-off signals mark destinations of riders on board; pickup signals
    mark floors this car was sent to by the dispatcher. They are kept apart
    so that serving one never erases the other.
    """

    elevator_id: int
    max_load: float
    floors_count: int
    current_floor: int = 1
    state: ElevatorState = ElevatorState.IDLE_CLOSED
    target_floor: int = 0
    direction: int = 0
    current_load: float = 0.0
    onboard: List[int] = field(default_factory=list)
    last_state_change_tick: int = 0
    projected_arrival_tick: int = 0
    stats: ElevatorStats = field(default_factory=ElevatorStats)
    dropoff_signals: List[bool] = field(init=False)
    pickup_signals: List[bool] = field(init=False)

    def __post_init__(self) -> None:
        if self.max_load <= 0:
            raise ContractViolation("Max load must be positive")
        if self.floors_count <= 0:
            raise ContractViolation("Total floors must be positive")
        self._check_floor(self.current_floor)
        self.dropoff_signals = [False] * (self.floors_count + 1)
        self.pickup_signals = [False] * (self.floors_count + 1)

    @property
    def is_idle(self) -> bool:
        return self.state.is_idle

    @property
    def is_moving(self) -> bool:
        return self.state.is_moving

    @property
    def pressed_buttons(self) -> List[bool]:
        return [drop or pick for drop, pick in zip(self.dropoff_signals, self.pickup_signals)]

    def set_state(self, new_state: ElevatorState, tick: int) -> None:
        elapsed = tick - self.last_state_change_tick
        if elapsed < 0:
            raise ContractViolation(
                f"Elevator #{self.elevator_id} state change at tick {tick} precedes tick {self.last_state_change_tick}"
            )
        if self.state.is_moving:
            self.stats.moving_ticks += elapsed
        else:
            self.stats.idle_ticks += elapsed
        self.last_state_change_tick = tick
        self.state = new_state
        if new_state == ElevatorState.MOVING_UP:
            self.direction = 1
        elif new_state == ElevatorState.MOVING_DOWN:
            self.direction = -1

    def travel_time_to(self, floor: int) -> int:
        return travel_time(floor - self.current_floor, self.current_load, self.max_load)

    def start_leg(self, target: int, tick: int) -> None:
        self._check_floor(target)
        if target > self.current_floor:
            new_state = ElevatorState.MOVING_UP
        elif target < self.current_floor:
            new_state = ElevatorState.MOVING_DOWN
        else:
            # Zero-length leg: keep heading the way the car was going.
            new_state = ElevatorState.MOVING_DOWN if self.direction < 0 else ElevatorState.MOVING_UP
        self.set_state(new_state, tick)
        self.target_floor = target
        self.projected_arrival_tick = tick + self.travel_time_to(target)

    def approximate_floor(self, tick: int) -> int:
        if self.is_idle or self.target_floor == 0:
            return self.current_floor
        return interpolate_floor(
            self.current_floor,
            self.target_floor,
            self.last_state_change_tick,
            self.projected_arrival_tick,
            tick,
        )

    def retarget(self, new_target: int, tick: int) -> int:
        """Send the car to ``new_target`` from wherever it is estimated to be.

        A moving car is snapped to its interpolated floor before the new
        leg is timed. Returns the floor the leg starts from.
        """
        self._check_floor(new_target)
        if self.is_moving:
            approx = self.approximate_floor(tick)
            self.stats.floors_passed += abs(approx - self.current_floor)
            self.current_floor = approx
        self.start_leg(new_target, tick)
        return self.current_floor

    def request_pickup(self, floor: int) -> None:
        self._check_floor(floor)
        self.pickup_signals[floor] = True

    def arrive(self, floor: int, tick: int) -> None:
        self._check_floor(floor)
        self.stats.floors_passed += abs(floor - self.current_floor)
        self.current_floor = floor
        self.target_floor = floor
        self.set_state(ElevatorState.IDLE_OPEN, tick)
        self.pickup_signals[floor] = False

    def close_doors(self, tick: int) -> None:
        self.set_state(ElevatorState.IDLE_CLOSED, tick)

    def park(self, tick: int) -> None:
        self.target_floor = 0
        self.direction = 0
        self.set_state(ElevatorState.IDLE_CLOSED, tick)

    def can_admit(self, weight: float) -> bool:
        return self.current_load + weight <= self.max_load

    def board(self, passenger: Passenger, riders: Mapping[int, Passenger], tick: int) -> bool:
        if not self.can_admit(passenger.weight):
            passenger.mark_overloaded()
            self.stats.overload_count += 1
            return False

        for rider_id in self.onboard:
            passenger.meet(riders[rider_id])
        self.onboard.append(passenger.passenger_id)
        self.dropoff_signals[passenger.destination] = True
        self.current_load += passenger.weight
        self.stats.total_cargo += passenger.weight
        self.stats.peak_load = max(self.stats.peak_load, self.current_load)
        passenger.record_boarding(tick)
        return True

    def alight(self, riders: Mapping[int, Passenger], tick: int) -> List[Passenger]:
        floor = self.current_floor
        leaving: List[Passenger] = []
        remaining: List[int] = []
        for rider_id in self.onboard:
            passenger = riders[rider_id]
            if passenger.destination == floor:
                passenger.record_alighting(tick)
                self.current_load -= passenger.weight
                leaving.append(passenger)
            else:
                remaining.append(rider_id)
        self.onboard = remaining
        if not remaining:
            # Avoid drift from repeated float subtraction.
            self.current_load = 0.0
        self.dropoff_signals[floor] = any(riders[pid].destination == floor for pid in remaining)
        return leaving

    def snapshot(self, tick: int) -> ElevatorSnapshot:
        return ElevatorSnapshot(
            elevator_id=self.elevator_id,
            position=self.approximate_floor(tick),
            direction=self.direction if self.is_moving else 0,
            idle=self.is_idle,
            load=self.current_load,
            max_load=self.max_load,
        )

    def _check_floor(self, floor: int) -> None:
        if not 1 <= floor <= self.floors_count:
            raise ContractViolation(
                f"Elevator #{self.elevator_id}: floor {floor} outside 1..{self.floors_count}"
            )
