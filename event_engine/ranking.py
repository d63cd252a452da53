"""Order enriched CMEs and split them into Earth-directed and other."""

from __future__ import annotations

import math
from typing import Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from event_engine.records import EnhancedCME

EARTH_DIRECTED_MAX_SCORE = 3


def timestamp_value(value) -> Optional[float]:
    """Seconds since the epoch for a feed timestamp, or None if unparsable."""
    if value is None or value == "":
        return None
    ts = pd.to_datetime(value, errors="coerce", utc=True)
    if pd.isna(ts):
        return None
    # .value is nanoseconds and overflows outside 1677-2262.
    return ts.timestamp()


def _descending_time_key(value) -> float:
    stamp = timestamp_value(value)
    return math.inf if stamp is None else -stamp


def sort_by_time_desc(records: Iterable, attr: str) -> List:
    """Newest first; records without a usable timestamp go last. Stable."""
    return sorted(records, key=lambda record: _descending_time_key(getattr(record, attr, None)))


def earth_directed_sort_key(cme: EnhancedCME) -> Tuple[float, float, float]:
    arrival = math.inf
    if cme.earth_impact_score == 1:
        stamp = timestamp_value(cme.display_enlil_arrival_time)
        arrival = math.inf if stamp is None else stamp
    return (cme.earth_impact_score, arrival, _descending_time_key(cme.start_time))


def partition(
    enhanced_cmes: Sequence[EnhancedCME],
) -> Tuple[List[EnhancedCME], List[EnhancedCME]]:
    """
    Split CMEs into (earth_directed, other).

    earth_directed holds scores <= 3 ordered by score, then earliest ENLIL
    arrival among score-1 entries, then newest start time. other keeps the
    newest-first start-time order.
    """
    by_start = sort_by_time_desc(enhanced_cmes, "start_time")
    earth_directed = sorted(
        (cme for cme in by_start if cme.earth_impact_score <= EARTH_DIRECTED_MAX_SCORE),
        key=earth_directed_sort_key,
    )
    other = [cme for cme in by_start if not cme.earth_impact_score <= EARTH_DIRECTED_MAX_SCORE]
    return earth_directed, other
