"""In-memory shared state of the escape game session.

The store only ever grows: positions, sorted items and revealed markers are
append-only sets and the treasure flag flips once. Every mutation reports
whether it changed anything so callers can decide whether to broadcast.
"""

from __future__ import annotations

import math
import re
import threading
from dataclasses import dataclass
from typing import Any

# ASCII only: no "1_000", no non-Latin digits.
_INTEGER_RE = re.compile(r"[+-]?[0-9]+", re.ASCII)


@dataclass(frozen=True)
class StoreSnapshot:
    positions: tuple[int, ...]
    items: tuple[str, ...]
    markers: tuple[str, ...]
    treasure_unlocked: bool

    def as_dict(self) -> dict[str, Any]:
        return {
            "positions": list(self.positions),
            "items": list(self.items),
            "markers": list(self.markers),
            "treasure_unlocked": self.treasure_unlocked,
        }


def coerce_position(value: Any) -> int | None:
    """Return `value` as a non-negative int, or None when it is not one.

    Accepts ints, integral floats and ASCII integral strings (``"3"``,
    ``" +3 "``). Booleans are rejected even though they subclass int.
    """

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        if not value.is_integer():
            return None
        number = int(value)
    elif isinstance(value, str):
        value = value.strip()
        if not _INTEGER_RE.fullmatch(value):
            return None
        number = int(value)
    else:
        return None
    return number if number >= 0 else None


def coerce_identifier(value: Any) -> str | None:
    """Return the trimmed identifier, or None for empty/unsupported input.

    Numbers are stringified, except falsy ones and NaN.
    """

    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        if not value or (isinstance(value, float) and math.isnan(value)):
            return None
        value = str(value)
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


class StateStore:
    """Three monotonic sets plus the terminal treasure flag.

    Sets are kept as insertion-ordered dicts so snapshots are stable, but
    consumers must not rely on the order.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._positions: dict[int, None] = {}
        self._items: dict[str, None] = {}
        self._markers: dict[str, None] = {}
        self._treasure_unlocked = False

    def _insert(self, bucket: dict, key) -> bool:
        with self._lock:
            before = len(bucket)
            bucket.setdefault(key, None)
            return len(bucket) != before

    def add_position(self, position: Any) -> bool:
        number = coerce_position(position)
        if number is None:
            return False
        return self._insert(self._positions, number)

    def add_sorted_item(self, item_id: Any) -> bool:
        key = coerce_identifier(item_id)
        if key is None:
            return False
        return self._insert(self._items, key)

    def add_revealed_marker(self, marker_id: Any) -> bool:
        key = coerce_identifier(marker_id)
        if key is None:
            return False
        return self._insert(self._markers, key)

    def unlock_treasure(self) -> bool:
        with self._lock:
            if self._treasure_unlocked:
                return False
            self._treasure_unlocked = True
            return True

    @property
    def treasure_unlocked(self) -> bool:
        return self._treasure_unlocked

    def positions(self) -> list[int]:
        with self._lock:
            return list(self._positions)

    def items(self) -> list[str]:
        with self._lock:
            return list(self._items)

    def markers(self) -> list[str]:
        with self._lock:
            return list(self._markers)

    def snapshot(self) -> StoreSnapshot:
        with self._lock:
            return StoreSnapshot(
                positions=tuple(self._positions),
                items=tuple(self._items),
                markers=tuple(self._markers),
                treasure_unlocked=self._treasure_unlocked,
            )
