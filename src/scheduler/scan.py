from __future__ import annotations

from typing import Optional, Sequence


class ScanPolicy:
    """Implements an elevator SCAN algorithm (elevator algorithm)."""

    def next_target(self, floor: int, direction: int, signals: Sequence[bool]) -> Optional[int]:
        # No established direction scans upward first.
        if direction >= 0:
            return self._scan_up(floor, signals) or self._scan_down(floor, signals)
        return self._scan_down(floor, signals) or self._scan_up(floor, signals)

    def _scan_up(self, floor: int, signals: Sequence[bool]) -> Optional[int]:
        for candidate in range(floor + 1, len(signals)):
            if signals[candidate]:
                return candidate
        return None

    def _scan_down(self, floor: int, signals: Sequence[bool]) -> Optional[int]:
        for candidate in range(floor - 1, 0, -1):
            if signals[candidate]:
                return candidate
        return None
