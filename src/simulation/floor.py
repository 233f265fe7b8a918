from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Iterator, List


@dataclass
class Floor:
    """Represents a floor with a single FIFO of waiting passenger ids."""

    number: int
    queue: Deque[int] = field(default_factory=deque)

    def add_passenger(self, passenger_id: int) -> None:
        self.queue.append(passenger_id)

    def has_waiting(self) -> bool:
        return bool(self.queue)

    def remove(self, boarded: List[int]) -> None:
        """Drop boarded ids while keeping the order of whoever is left behind."""
        if not boarded:
            return
        taken = set(boarded)
        self.queue = deque(pid for pid in self.queue if pid not in taken)

    def __iter__(self) -> Iterator[int]:
        return iter(self.queue)

    def __len__(self) -> int:
        return len(self.queue)
