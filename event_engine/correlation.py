"""
Link flares and interplanetary shocks to the CMEs they reference.

Records only point at each other through DONKI activity IDs. A read-only
index `activity_id -> EnhancedCME` is built once per cycle; annotated
flares and shocks receive copies of the CME fields, never the CME itself.
IDs that do not resolve point outside the fetch window and are skipped.
"""

from __future__ import annotations

from dataclasses import replace
from types import MappingProxyType
from typing import Iterable, List, Mapping, Sequence

from event_engine.records import AssociatedCME, EnhancedCME, InterplanetaryShock, SolarFlare


def build_cme_index(enhanced_cmes: Iterable[EnhancedCME]) -> Mapping[str, EnhancedCME]:
    index = {}
    for cme in enhanced_cmes:
        # duplicate IDs within a window: last one wins
        index[cme.activity_id] = cme
    return MappingProxyType(index)


def correlate_flare(flare: SolarFlare, index: Mapping[str, EnhancedCME]) -> SolarFlare:
    associated = tuple(
        AssociatedCME.from_enhanced(index[activity_id])
        for activity_id in flare.linked_events
        if activity_id in index
    )
    return replace(flare, associated_cmes=associated)


def correlate_shock(
    shock: InterplanetaryShock, index: Mapping[str, EnhancedCME]
) -> InterplanetaryShock:
    for activity_id in shock.linked_events:
        cme = index.get(activity_id)
        if cme is None:
            continue
        return replace(
            shock,
            associated_cme_speed=cme.display_analysis_speed,
            associated_cme_start_time=cme.start_time,
            associated_cme_link=cme.link,
            associated_cme_activity_id=cme.activity_id,
        )
    return shock


def correlate(target_events: Sequence, enhanced_cmes: Iterable[EnhancedCME]) -> List:
    """
    Return `target_events` in the same order, each flare annotated with
    every linked CME and each shock with its first resolvable CME.
    """
    index = build_cme_index(enhanced_cmes)
    annotated = []
    for event in target_events:
        if isinstance(event, SolarFlare):
            annotated.append(correlate_flare(event, index))
        elif isinstance(event, InterplanetaryShock):
            annotated.append(correlate_shock(event, index))
        else:
            raise TypeError(
                f"Cannot correlate {type(event).__name__}; expected SolarFlare or InterplanetaryShock."
            )
    return annotated
