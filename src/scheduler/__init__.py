from __future__ import annotations

from typing import Dict, Type

from .interface import ElevatorSelector, ElevatorSnapshot, FloorCall, TargetPolicy
from .nearest import NearestSuitableSelector
from .scan import ScanPolicy
from .utils import interpolate_floor, ticks_per_floor, travel_time

__all__ = [
    "ElevatorSelector",
    "ElevatorSnapshot",
    "FloorCall",
    "NearestSuitableSelector",
    "ScanPolicy",
    "TargetPolicy",
    "get_selector",
    "get_target_policy",
    "interpolate_floor",
    "ticks_per_floor",
    "travel_time",
]


SELECTOR_REGISTRY: Dict[str, Type[ElevatorSelector]] = {
    "nearest_suitable": NearestSuitableSelector,
}

TARGET_POLICY_REGISTRY: Dict[str, Type[TargetPolicy]] = {
    "scan": ScanPolicy,
}


def get_selector(name: str, **kwargs) -> ElevatorSelector:
    cls = SELECTOR_REGISTRY.get(name.lower())
    if cls is None:
        raise ValueError(f"Unknown selector '{name}'. Available: {', '.join(SELECTOR_REGISTRY)}")
    return cls(**kwargs)


def get_target_policy(name: str, **kwargs) -> TargetPolicy:
    cls = TARGET_POLICY_REGISTRY.get(name.lower())
    if cls is None:
        raise ValueError(
            f"Unknown target policy '{name}'. Available: {', '.join(TARGET_POLICY_REGISTRY)}"
        )
    return cls(**kwargs)
