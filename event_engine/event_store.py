from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from space_weather_api import FetchWindow


class RawEventStore:
    """
    In-memory raw records for one refresh cycle, keyed by (kind, window).

    A new store is created per cycle and dropped afterwards; nothing is
    carried between cycles.
    """

    def __init__(self):
        self._records: Dict[Tuple[str, FetchWindow], Tuple] = {}

    def put(self, kind: str, window: FetchWindow, records: Iterable) -> Tuple:
        stored = tuple(records)
        self._records[(kind, window)] = stored
        return stored

    def get(self, kind: str, window: FetchWindow) -> Tuple:
        return self._records.get((kind, window), ())

    def has(self, kind: str, window: FetchWindow) -> bool:
        return (kind, window) in self._records

    def kinds(self) -> List[str]:
        return sorted({kind for kind, _ in self._records})

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return sum(len(records) for records in self._records.values())
