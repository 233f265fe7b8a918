"""Simulation primitives for LiftLogic."""

from .arrivals import ArrivalIndex
from .building import Building
from .config import BuildingConfig, SimulationOptions
from .elevator import Elevator, ElevatorState, ElevatorStats
from .errors import ConfigError, ContractViolation, LiftLogicError, ScheduleError
from .floor import Floor
from .log import LoggerSink, LogSink, NullLogSink
from .passenger import Passenger
from .simulation import ElevatorSystem

__all__ = [
    "ArrivalIndex",
    "Building",
    "BuildingConfig",
    "ConfigError",
    "ContractViolation",
    "Elevator",
    "ElevatorState",
    "ElevatorStats",
    "ElevatorSystem",
    "Floor",
    "LiftLogicError",
    "LogSink",
    "LoggerSink",
    "NullLogSink",
    "Passenger",
    "ScheduleError",
    "SimulationOptions",
]
