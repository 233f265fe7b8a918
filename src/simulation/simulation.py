from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, Set, Union

from scheduler import ElevatorSelector, FloorCall, TargetPolicy, get_selector, get_target_policy

from .arrivals import ArrivalIndex
from .building import Building
from .config import BuildingConfig, SimulationOptions
from .elevator import Elevator, ElevatorState
from .errors import ContractViolation, ScheduleError
from .log import LogSink, NullLogSink
from .passenger import Passenger

LOAD_TOLERANCE = 1e-9


class ElevatorSystem:
    """Tick-driven dispatcher owning the elevators, passengers and clock.

    Within a tick the order is fixed: release due passengers, assign
    elevators to open floor calls (ascending floor), then process arrivals
    (ascending elevator id). Passengers live in a single table keyed by id;
    queues, cars and the arrival index only hold ids.
    """

    def __init__(
        self,
        building: Building,
        passengers: Iterable[Passenger] = (),
        log: Optional[LogSink] = None,
        selector: Union[str, ElevatorSelector] = "nearest_suitable",
        target_policy: Union[str, TargetPolicy] = "scan",
        strict: bool = True,
    ) -> None:
        self.building = building
        self.log = log or NullLogSink()
        self.selector = get_selector(selector) if isinstance(selector, str) else selector
        self.target_policy = (
            get_target_policy(target_policy) if isinstance(target_policy, str) else target_policy
        )
        self.strict = strict
        self.passengers: Dict[int, Passenger] = {}
        self.arrivals = ArrivalIndex()
        self.called_floors: Set[int] = set()
        self.current_time: int = 0
        self.remaining_passengers: int = 0
        self.finished = False
        self.event_hooks: Dict[str, List[Callable[[object], None]]] = {}
        for passenger in passengers:
            self.add_passenger(passenger)

    @classmethod
    def from_config(
        cls,
        config: BuildingConfig,
        passengers: Iterable[Passenger] = (),
        options: Optional[SimulationOptions] = None,
        log: Optional[LogSink] = None,
    ) -> "ElevatorSystem":
        options = options or SimulationOptions()
        building = Building.from_config(config, options)
        return cls(
            building,
            passengers,
            log=log,
            selector=options.selector,
            target_policy=options.target_policy,
        )

    @property
    def elevators(self) -> List[Elevator]:
        return self.building.elevators

    def add_passenger(self, passenger: Passenger) -> bool:
        """Register a scheduled passenger; repeated ids are ignored."""
        if passenger.passenger_id in self.passengers:
            self.log.information(f"Passenger #{passenger.passenger_id} already scheduled, ignoring")
            return False
        for floor in (passenger.origin, passenger.destination):
            if not self.building.contains_floor(floor):
                raise ScheduleError(
                    f"Invalid floor number for passenger {passenger.passenger_id}: {floor} "
                    f"(building has only {self.building.floors_count} floors)"
                )
        if passenger.origin == passenger.destination:
            raise ScheduleError(
                f"Passenger {passenger.passenger_id} boards and leaves on floor {passenger.origin}"
            )
        if passenger.weight <= 0:
            raise ScheduleError(f"Invalid weight {passenger.weight:g} for passenger {passenger.passenger_id}")
        if all(passenger.weight > elevator.max_load for elevator in self.elevators):
            raise ScheduleError(
                f"Passenger {passenger.passenger_id} weighs {passenger.weight:g} kg, more than any elevator can carry"
            )
        if passenger.appear_tick < self.current_time:
            raise ContractViolation(
                f"Passenger #{passenger.passenger_id} appears at {passenger.appear_tick}, "
                f"clock is already at {self.current_time}"
            )
        self.passengers[passenger.passenger_id] = passenger
        self.arrivals.add(passenger)
        self.remaining_passengers += 1
        return True

    def run(self) -> int:
        self.log.information("Modeling starts!")
        while self.remaining_passengers > 0:
            self.step()
        self.finalize()
        return self.current_time

    def step(self) -> None:
        self.arrive_passengers(self.current_time)
        self.dispatch_calls()
        self.process_arrivals()
        if self.strict:
            self.check_invariants()
        self._emit("tick", {"time": self.current_time, "building": self.building.snapshot()})
        self.current_time += 1

    def finalize(self) -> None:
        for elevator in self.elevators:
            elevator.set_state(ElevatorState.IDLE_CLOSED, self.current_time)
        self.finished = True
        self.log.information(f"Modeling finished at [{self.current_time}]")
        self._emit("finished", {"time": self.current_time, "delivered": len(self.delivered())})

    def on_event(self, event: str, callback: Callable[[object], None]) -> None:
        self.event_hooks.setdefault(event, []).append(callback)

    def arrive_passengers(self, tick: int) -> List[int]:
        released = self.arrivals.release(tick)
        for passenger_id in released:
            passenger = self.passengers[passenger_id]
            self.building.get_floor(passenger.origin).add_passenger(passenger_id)
            self.log.information(
                f"[{tick}] Passenger #{passenger_id} waiting elevator at floor {passenger.origin}, "
                f"Target floor: {passenger.destination}"
            )
        return released

    def dispatch_calls(self) -> None:
        for floor in self.building.waiting_floors():
            if floor.number in self.called_floors:
                continue
            elevator = self.calculate_most_suitable_elevator(floor.number)
            if elevator is None:
                self.log.information(
                    f"[{self.current_time}] No suitable elevator found for floor {floor.number}"
                )
                continue
            self.called_floors.add(floor.number)
            self.assign_call(elevator, floor.number)

    def process_arrivals(self) -> None:
        for elevator in self.elevators:
            if (
                elevator.is_moving
                and elevator.target_floor != 0
                and self.current_time >= elevator.projected_arrival_tick
            ):
                self.process_floor_arrival(elevator.target_floor, elevator)

    def calculate_most_suitable_elevator(self, floor: int) -> Optional[Elevator]:
        waiting = self.building.get_floor(floor)
        call = FloorCall(
            floor=floor,
            waiting_weights=tuple(self.passengers[pid].weight for pid in waiting),
        )
        snapshots = [elevator.snapshot(self.current_time) for elevator in self.elevators]
        elevator_id = self.selector.select(snapshots, call)
        if elevator_id is None:
            return None
        return self.building.get_elevator(elevator_id)

    def assign_call(self, elevator: Optional[Elevator], floor: int) -> None:
        """Hand a floor call to ``elevator``.

        A car already standing at the floor serves it on the spot. Otherwise
        the floor's pickup signal is set and the car either reaches it in
        the course of its current leg or is interrupted and redirected.
        """
        self._check_elevator(elevator, "assign_call")
        if floor == 0:
            raise ContractViolation("target floor can not be 0")
        if not self.building.contains_floor(floor):
            raise ContractViolation(f"Invalid floor number {floor}")

        if elevator.is_idle and elevator.current_floor == floor:
            self.process_floor_arrival(floor, elevator)
            return

        elevator.request_pickup(floor)
        if elevator.is_idle:
            self.log.information(
                f"[{self.current_time}] Elevator #{elevator.elevator_id} called from floor {elevator.current_floor} to floor {floor}"
            )
            self.calculate_next_elevator_target(elevator)
            return

        approx = elevator.approximate_floor(self.current_time)
        target = elevator.target_floor
        if elevator.direction > 0:
            on_the_way = approx <= floor < target
        else:
            on_the_way = target < floor <= approx
        if not on_the_way:
            if floor != target:
                self.log.information(
                    f"[{self.current_time}] Elevator #{elevator.elevator_id} will reach floor {floor} after floor {target}"
                )
            return

        start = elevator.retarget(floor, self.current_time)
        self.log.information(
            f"[{self.current_time}] Elevator #{elevator.elevator_id} interrupted to floor {floor} "
            f"(approximate current floor: {start}), will arrive at [{elevator.projected_arrival_tick}]"
        )

    def process_floor_arrival(self, floor: int, elevator: Optional[Elevator]) -> None:
        self._check_elevator(elevator, "process_floor_arrival")
        waiting = self.building.get_floor(floor)

        elevator.arrive(floor, self.current_time)
        self.called_floors.discard(floor)
        self.log.information(
            f"[{self.current_time}] Elevator #{elevator.elevator_id} arrived at floor {floor}"
        )

        for passenger in elevator.alight(self.passengers, self.current_time):
            self.remaining_passengers -= 1
            self.log.information(
                f"[{self.current_time}] Passenger #{passenger.passenger_id} arrived at floor {floor} "
                f"via elevator #{elevator.elevator_id}"
            )

        boarded: List[int] = []
        for passenger_id in waiting:
            passenger = self.passengers[passenger_id]
            if elevator.board(passenger, self.passengers, self.current_time):
                boarded.append(passenger_id)
                self.log.information(
                    f"[{self.current_time}] Passenger #{passenger_id} entered elevator #{elevator.elevator_id} on floor {floor}"
                )
            else:
                self.log.information(
                    f"[{self.current_time}] Passenger #{passenger_id} rejected by elevator #{elevator.elevator_id}: overload"
                )
        waiting.remove(boarded)

        elevator.close_doors(self.current_time)
        self.calculate_next_elevator_target(elevator)

    def calculate_next_elevator_target(self, elevator: Optional[Elevator]) -> Optional[int]:
        self._check_elevator(elevator, "calculate_next_elevator_target")
        previous_direction = elevator.direction
        target = self.target_policy.next_target(
            elevator.current_floor, elevator.direction, elevator.pressed_buttons
        )
        if target is None:
            self.log.information(
                f"[{self.current_time}] Elevator #{elevator.elevator_id} started idleing (no buttons pressed)"
            )
            elevator.park(self.current_time)
            return None

        elevator.start_leg(target, self.current_time)
        verb = "continues" if previous_direction in (0, elevator.direction) else "changes direction to"
        self.log.information(
            f"[{self.current_time}] Elevator #{elevator.elevator_id} {verb} {elevator.state.value} "
            f"- next target floor {target}, will arrive at [{elevator.projected_arrival_tick}]"
        )
        return target

    def check_invariants(self) -> None:
        for elevator in self.elevators:
            onboard_weight = sum(self.passengers[pid].weight for pid in elevator.onboard)
            tolerance = LOAD_TOLERANCE * elevator.max_load
            if abs(onboard_weight - elevator.current_load) > tolerance:
                raise ContractViolation(
                    f"Elevator #{elevator.elevator_id} load {elevator.current_load} != onboard weight {onboard_weight}"
                )
            if elevator.current_load > elevator.max_load + tolerance:
                raise ContractViolation(f"Elevator #{elevator.elevator_id} exceeds max load")

    def delivered(self) -> List[Passenger]:
        return [p for p in self.passengers.values() if p.delivered]

    def _check_elevator(self, elevator: Optional[Elevator], where: str) -> None:
        if elevator is None:
            raise ContractViolation(f"Null elevator ({where})")
        if all(elevator is not candidate for candidate in self.elevators):
            raise ContractViolation(f"Elevator #{elevator.elevator_id} does not belong to this system ({where})")

    def _emit(self, event: str, payload: object) -> None:
        for callback in self.event_hooks.get(event, []):
            callback(payload)
