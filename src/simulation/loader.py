"""Readers for the building configuration and passenger schedule files."""
from __future__ import annotations

import math
from pathlib import Path
from typing import List, Optional, Set, Union

from .config import BuildingConfig
from .errors import ConfigError, ScheduleError
from .log import LogSink, NullLogSink
from .passenger import Passenger

RECORD_FIELDS = 5
MINUTES_PER_HOUR = 60


def load_building_config(path: Union[str, Path], log: Optional[LogSink] = None) -> BuildingConfig:
    text = _read_text(path)
    if not text.strip():
        raise ConfigError(f"Configuration file is empty: {path}")
    config = parse_building_config(text)
    (log or NullLogSink()).information(
        f"Parsed elevators file. Results: {config.elevators_count} elevators, {config.floors_count} floors"
    )
    return config


def parse_building_config(text: str) -> BuildingConfig:
    """Parse ``floors elevators`` followed by one max load per elevator."""

    tokens = text.split()
    if len(tokens) < 2:
        raise ConfigError("Failed to read number of floors and elevators")
    try:
        floors_count = int(tokens[0])
        elevators_count = int(tokens[1])
    except ValueError:
        raise ConfigError("Failed to read number of floors and elevators") from None
    if floors_count <= 0:
        raise ConfigError("Number of floors (n) must be positive")
    if elevators_count <= 0:
        raise ConfigError("Number of elevators (k) must be positive")

    max_loads: List[float] = []
    for index in range(elevators_count):
        position = 2 + index
        if position >= len(tokens):
            raise ConfigError(
                f"Failed to read max_load for elevator {index + 1}. Expected {elevators_count} values"
            )
        max_load = _parse_real(tokens[position])
        if max_load is None:
            raise ConfigError(f"Failed to read max_load for elevator {index + 1}: '{tokens[position]}'")
        if max_load <= 0:
            raise ConfigError(
                f"Invalid max_load for elevator {index + 1}: must be positive (got {max_load:g})"
            )
        max_loads.append(max_load)

    extra = tokens[2 + elevators_count:]
    if extra:
        raise ConfigError(
            f"Unexpected data in configuration file after elevator specifications: '{extra[0]}'"
        )

    config = BuildingConfig(floors_count=floors_count, max_loads=max_loads)
    config.validate()
    return config


def load_schedule(
    path: Union[str, Path], config: BuildingConfig, log: Optional[LogSink] = None
) -> List[Passenger]:
    return parse_schedule(_read_text(path), config, log)


def parse_schedule(
    text: str, config: BuildingConfig, log: Optional[LogSink] = None
) -> List[Passenger]:
    """Parse ``id weight boarding_floor hh:mm target_floor`` records.

    Returns passengers in first-occurrence order; a repeated id keeps the
    first record. Anything that could never be delivered is rejected here
    so the simulation is guaranteed to terminate.
    """

    log = log or NullLogSink()
    tokens = text.split()
    if len(tokens) % RECORD_FIELDS:
        raise ScheduleError(
            f"Incomplete passenger record at the end of the schedule: {' '.join(tokens[-(len(tokens) % RECORD_FIELDS):])}"
        )

    passengers: List[Passenger] = []
    seen: Set[int] = set()
    for start in range(0, len(tokens), RECORD_FIELDS):
        raw_id, raw_weight, raw_origin, raw_time, raw_target = tokens[start:start + RECORD_FIELDS]
        passenger_id = _parse_count(raw_id, "passenger id")
        weight = _parse_real(raw_weight)
        if weight is None or weight <= 0:
            raise ScheduleError(f"Invalid weight '{raw_weight}' for passenger {passenger_id}")
        origin = _parse_count(raw_origin, f"boarding floor of passenger {passenger_id}")
        target = _parse_count(raw_target, f"target floor of passenger {passenger_id}")
        appear_tick = time_to_numerical(raw_time)

        for floor in (origin, target):
            if not 1 <= floor <= config.floors_count:
                raise ScheduleError(
                    f"Invalid floor number for passenger {passenger_id}: current_floor={origin}, "
                    f"target_floor={target} (building has only {config.floors_count} floors)"
                )
        if passenger_id in seen:
            log.information(f"Passenger #{passenger_id} listed twice, keeping the first record")
            continue

        if origin == target:
            raise ScheduleError(f"Passenger {passenger_id} boards and leaves on floor {origin}")
        if weight > config.largest_max_load:
            raise ScheduleError(
                f"Passenger {passenger_id} weighs {weight:g} kg, more than any elevator can carry"
            )
        seen.add(passenger_id)
        passengers.append(
            Passenger(
                passenger_id=passenger_id,
                appear_tick=appear_tick,
                origin=origin,
                destination=target,
                weight=weight,
            )
        )
        log.information(
            f"Passenger #{passenger_id} | {weight:g} kg | {raw_time} | floor {origin} → floor {target}"
        )
    return passengers


def time_to_numerical(value: str) -> int:
    """Convert ``hh:mm`` into minutes since midnight, the simulation tick."""

    hours_str, colon, minutes_str = value.partition(":")
    if not colon:
        raise ScheduleError(f"Invalid time format for '{value}'. Expected 'hh:mm'")
    if not (hours_str.isdecimal() and minutes_str.isdecimal()):
        raise ScheduleError(f"Invalid time format for '{value}'. Expected 'hh:mm'")
    hours = int(hours_str)
    minutes = int(minutes_str)
    if minutes >= MINUTES_PER_HOUR:
        raise ScheduleError(f"Invalid minutes value {minutes_str} in '{value}'. Must be < 60")
    return hours * MINUTES_PER_HOUR + minutes


def _parse_count(token: str, what: str) -> int:
    if not token.isdecimal():
        raise ScheduleError(f"Invalid {what}: '{token}'")
    return int(token)


def _parse_real(token: str) -> Optional[float]:
    try:
        value = float(token)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def _read_text(path: Union[str, Path]) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to open configuration file: {path} ({exc.strerror})") from exc
