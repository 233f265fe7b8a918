from __future__ import annotations


class LiftLogicError(Exception):
    """Base class for every error raised by the simulator."""


class ConfigError(LiftLogicError, ValueError):
    """Building configuration is missing, unreadable or invalid."""


class ScheduleError(LiftLogicError, ValueError):
    """Passenger schedule contains a record that cannot be simulated."""


class ContractViolation(LiftLogicError, RuntimeError):
    """Internal invariant broken by a caller; indicates a bug, not bad input."""
