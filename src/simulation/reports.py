from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Iterable, List, Union

from .elevator import Elevator
from .passenger import Passenger

if TYPE_CHECKING:
    from .simulation import ElevatorSystem


def _real(value: float) -> str:
    return f"{value:g}"


def format_passenger_report(passengers: Iterable[Passenger]) -> str:
    lines: List[str] = []
    for passenger in sorted(passengers, key=lambda p: p.passenger_id):
        board_tick = passenger.board_tick if passenger.board_tick is not None else 0
        met = ", ".join(str(pid) for pid in sorted(passenger.met_passengers))
        lines.extend(
            [
                f"Passenger {passenger.passenger_id}:",
                f"  Appearance time: {passenger.appear_tick}",
                f"  Origin floor: {passenger.origin}",
                f"  Target floor: {passenger.destination}",
                f"  Boarding time: {board_tick}",
                f"  Total travel time: {passenger.ride_time or 0}",
                f"  Met passengers: {met}",
                f"  Had overload: {'yes' if passenger.overloaded_once else 'no'}",
                "",
            ]
        )
    return "\n".join(lines) + ("\n" if lines else "")


def format_elevator_report(elevators: Iterable[Elevator], total_ticks: int) -> str:
    lines: List[str] = []
    for elevator in sorted(elevators, key=lambda e: e.elevator_id):
        stats = elevator.stats
        lines.extend(
            [
                f"Elevator {elevator.elevator_id}:",
                f"  Idle time: {stats.idle_ticks}",
                f"  Moving time: {total_ticks - stats.idle_ticks}",
                f"  Floors passed: {stats.floors_passed}",
                f"  Total cargo: {_real(stats.total_cargo)}",
                f"  Max load reached: {_real(stats.peak_load)}",
                f"  Overloads count: {stats.overload_count}",
                "",
            ]
        )
    return "\n".join(lines) + ("\n" if lines else "")


def write_reports(
    system: "ElevatorSystem",
    passengers_path: Union[str, Path],
    elevators_path: Union[str, Path],
) -> None:
    passengers_path = Path(passengers_path)
    elevators_path = Path(elevators_path)
    for path in (passengers_path, elevators_path):
        path.parent.mkdir(parents=True, exist_ok=True)
    passengers_path.write_text(format_passenger_report(system.passengers.values()), encoding="utf-8")
    elevators_path.write_text(
        format_elevator_report(system.elevators, system.current_time), encoding="utf-8"
    )
