"""
Typed records for DONKI event feeds.

One frozen dataclass per event kind, tagged with a `KIND` class attribute
(`CME`, `FLR`, `IPS`, `GST`). Every `from_donki` constructor is total over
sparse payloads: missing keys, `null` arrays and wrongly-typed values turn
into `None` or empty tuples instead of raising.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from typing import Any, Optional, Tuple

NOT_EARTH_RELEVANT = math.inf
EARTH_GEOSPACE = "Earth Geospace"


def _as_list(value) -> list:
    return value if isinstance(value, list) else []


def _as_dicts(value) -> list:
    return [item for item in _as_list(value) if isinstance(item, dict)]


def _as_str(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text if text else None


def _as_float(value) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) else number


def _as_int(value) -> Optional[int]:
    number = _as_float(value)
    return None if number is None else int(number)


def _as_bool(value) -> Optional[bool]:
    return value if isinstance(value, bool) else None


def _linked_ids(value) -> Tuple[str, ...]:
    ids = []
    for item in _as_dicts(value):
        activity_id = _as_str(item.get("activityID"))
        if activity_id:
            ids.append(activity_id)
    return tuple(ids)


def _instrument_names(value) -> Tuple[str, ...]:
    return tuple(
        name for name in (_as_str(item.get("displayName")) for item in _as_dicts(value)) if name
    )


class Event:
    """Identity shared by every feed record: an ID, a link and a note."""

    KIND = "EVENT"
    ID_FIELD = "activity_id"

    @property
    def event_id(self) -> Optional[str]:
        return getattr(self, self.ID_FIELD, None)


@dataclass(frozen=True)
class EnlilImpact:
    location: Optional[str] = None
    arrival_time: Optional[str] = None
    is_glancing_blow: Optional[bool] = None

    @classmethod
    def from_donki(cls, payload: dict) -> "EnlilImpact":
        return cls(
            location=_as_str(payload.get("location")),
            arrival_time=_as_str(payload.get("arrivalTime")),
            is_glancing_blow=_as_bool(payload.get("isGlancingBlow")),
        )


@dataclass(frozen=True)
class EnlilSimulation:
    estimated_shock_arrival_time: Optional[str] = None
    estimated_duration: Optional[float] = None
    is_earth_geomagnetic: Optional[bool] = None
    # None when the feed omits the list; () when it is present but empty.
    impact_list: Optional[Tuple[EnlilImpact, ...]] = None
    model_completion_time: Optional[str] = None
    au: Optional[float] = None
    kp_18: Optional[float] = None
    kp_90: Optional[float] = None
    kp_135: Optional[float] = None
    kp_180: Optional[float] = None
    link: Optional[str] = None

    @classmethod
    def from_donki(cls, payload: dict) -> "EnlilSimulation":
        impacts = payload.get("impactList")
        return cls(
            estimated_shock_arrival_time=_as_str(payload.get("estimatedShockArrivalTime")),
            estimated_duration=_as_float(payload.get("estimatedDuration")),
            is_earth_geomagnetic=_as_bool(payload.get("isEarthGB")),
            impact_list=(
                tuple(EnlilImpact.from_donki(item) for item in _as_dicts(impacts))
                if isinstance(impacts, list)
                else None
            ),
            model_completion_time=_as_str(payload.get("modelCompletionTime")),
            au=_as_float(payload.get("au")),
            kp_18=_as_float(payload.get("kp_18")),
            kp_90=_as_float(payload.get("kp_90")),
            kp_135=_as_float(payload.get("kp_135")),
            kp_180=_as_float(payload.get("kp_180")),
            link=_as_str(payload.get("link")),
        )


@dataclass(frozen=True)
class CMEAnalysis:
    speed: Optional[float] = None
    half_angle: Optional[float] = None
    type: Optional[str] = None
    note: Optional[str] = None
    is_most_accurate: bool = False
    enlil_simulations: Tuple[EnlilSimulation, ...] = ()
    time21_5: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    level_of_data: Optional[int] = None
    link: Optional[str] = None

    @classmethod
    def from_donki(cls, payload: dict) -> "CMEAnalysis":
        return cls(
            speed=_as_float(payload.get("speed")),
            half_angle=_as_float(payload.get("halfAngle")),
            type=_as_str(payload.get("type")),
            note=_as_str(payload.get("note")),
            is_most_accurate=payload.get("isMostAccurate") is True,
            enlil_simulations=tuple(
                EnlilSimulation.from_donki(item) for item in _as_dicts(payload.get("enlilList"))
            ),
            time21_5=_as_str(payload.get("time21_5")),
            latitude=_as_float(payload.get("latitude")),
            longitude=_as_float(payload.get("longitude")),
            level_of_data=_as_int(payload.get("levelOfData")),
            link=_as_str(payload.get("link")),
        )


@dataclass(frozen=True)
class CME(Event):
    activity_id: str
    start_time: Optional[str] = None
    source_location: Optional[str] = None
    note: Optional[str] = None
    link: Optional[str] = None
    analyses: Tuple[CMEAnalysis, ...] = ()
    linked_events: Tuple[str, ...] = ()
    active_region_num: Optional[int] = None
    catalog: Optional[str] = None
    instruments: Tuple[str, ...] = ()

    KIND = "CME"

    @classmethod
    def from_donki(cls, payload: dict) -> "CME":
        return cls(
            activity_id=_as_str(payload.get("activityID")) or "",
            start_time=_as_str(payload.get("startTime")),
            source_location=_as_str(payload.get("sourceLocation")),
            note=_as_str(payload.get("note")),
            link=_as_str(payload.get("link")),
            analyses=tuple(
                CMEAnalysis.from_donki(item) for item in _as_dicts(payload.get("cmeAnalyses"))
            ),
            linked_events=_linked_ids(payload.get("linkedEvents")),
            active_region_num=_as_int(payload.get("activeRegionNum")),
            catalog=_as_str(payload.get("catalog")),
            instruments=_instrument_names(payload.get("instruments")),
        )


@dataclass(frozen=True)
class EnhancedCME(CME):
    """A CME plus the fields derived by `event_engine.enrichment.enrich`."""

    earth_impact_score: float = NOT_EARTH_RELEVANT
    display_analysis_speed: Optional[float] = None
    display_analysis_half_angle: Optional[float] = None
    display_analysis_type: Optional[str] = None
    display_analysis_note: Optional[str] = None
    display_enlil_arrival_time: Optional[str] = None
    display_enlil_duration: Optional[float] = None
    display_enlil_impact_locations: Optional[Tuple[str, ...]] = None
    is_potentially_earth_directed: bool = False

    @classmethod
    def from_cme(cls, cme: CME, **derived: Any) -> "EnhancedCME":
        base = {f.name: getattr(cme, f.name) for f in fields(CME)}
        return cls(**base, **derived)


@dataclass(frozen=True)
class AssociatedCME:
    """Read-only projection of an EnhancedCME attached to a flare."""

    activity_id: str
    start_time: Optional[str] = None
    note: Optional[str] = None
    link: Optional[str] = None
    earth_impact_score: float = NOT_EARTH_RELEVANT

    @classmethod
    def from_enhanced(cls, cme: EnhancedCME) -> "AssociatedCME":
        return cls(
            activity_id=cme.activity_id,
            start_time=cme.start_time,
            note=cme.note,
            link=cme.link,
            earth_impact_score=cme.earth_impact_score,
        )


@dataclass(frozen=True)
class SolarFlare(Event):
    flr_id: str
    begin_time: Optional[str] = None
    peak_time: Optional[str] = None
    end_time: Optional[str] = None
    class_type: Optional[str] = None
    source_location: Optional[str] = None
    active_region_num: Optional[int] = None
    link: Optional[str] = None
    note: Optional[str] = None
    linked_events: Tuple[str, ...] = ()
    associated_cmes: Tuple[AssociatedCME, ...] = ()

    KIND = "FLR"
    ID_FIELD = "flr_id"

    @classmethod
    def from_donki(cls, payload: dict) -> "SolarFlare":
        return cls(
            flr_id=_as_str(payload.get("flrID")) or _as_str(payload.get("activityID")) or "",
            begin_time=_as_str(payload.get("beginTime")),
            peak_time=_as_str(payload.get("peakTime")),
            end_time=_as_str(payload.get("endTime")),
            class_type=_as_str(payload.get("classType")),
            source_location=_as_str(payload.get("sourceLocation")),
            active_region_num=_as_int(payload.get("activeRegionNum")),
            link=_as_str(payload.get("link")),
            note=_as_str(payload.get("note")),
            linked_events=_linked_ids(payload.get("linkedEvents")),
        )

    @property
    def class_letter(self) -> Optional[str]:
        return self.class_type[0].upper() if self.class_type else None


@dataclass(frozen=True)
class InterplanetaryShock(Event):
    ips_id: str
    event_time: Optional[str] = None
    location: Optional[str] = None
    link: Optional[str] = None
    note: Optional[str] = None
    instruments: Tuple[str, ...] = ()
    linked_events: Tuple[str, ...] = ()
    associated_cme_speed: Optional[float] = None
    associated_cme_start_time: Optional[str] = None
    associated_cme_link: Optional[str] = None
    associated_cme_activity_id: Optional[str] = None

    KIND = "IPS"
    ID_FIELD = "ips_id"

    @classmethod
    def from_donki(cls, payload: dict) -> "InterplanetaryShock":
        return cls(
            ips_id=_as_str(payload.get("ipsID")) or _as_str(payload.get("activityID")) or "",
            event_time=_as_str(payload.get("eventTime")),
            # DONKI spells this key "locatioN" on IPS records.
            location=_as_str(payload.get("location", payload.get("locatioN"))),
            link=_as_str(payload.get("link")),
            note=_as_str(payload.get("note")),
            instruments=_instrument_names(payload.get("instruments")),
            linked_events=_linked_ids(payload.get("linkedEvents")),
        )


@dataclass(frozen=True)
class KpIndex:
    observed_time: Optional[str] = None
    kp_value: Optional[float] = None
    source: Optional[str] = None

    @classmethod
    def from_donki(cls, payload: dict) -> "KpIndex":
        return cls(
            observed_time=_as_str(payload.get("observedTime")),
            kp_value=_as_float(payload.get("kpIndex", payload.get("kpValue"))),
            source=_as_str(payload.get("source")),
        )


@dataclass(frozen=True)
class GeomagneticStorm(Event):
    gst_id: str
    start_time: Optional[str] = None
    link: Optional[str] = None
    note: Optional[str] = None
    kp_indices: Tuple[KpIndex, ...] = ()
    linked_events: Tuple[str, ...] = ()

    KIND = "GST"
    ID_FIELD = "gst_id"

    @classmethod
    def from_donki(cls, payload: dict) -> "GeomagneticStorm":
        return cls(
            gst_id=_as_str(payload.get("gstID")) or _as_str(payload.get("activityID")) or "",
            start_time=_as_str(payload.get("startTime")),
            link=_as_str(payload.get("link")),
            note=_as_str(payload.get("note")),
            kp_indices=tuple(KpIndex.from_donki(item) for item in _as_dicts(payload.get("allKpIndex"))),
            linked_events=_linked_ids(payload.get("linkedEvents")),
        )

    @property
    def max_kp(self) -> Optional[float]:
        values = [kp.kp_value for kp in self.kp_indices if kp.kp_value is not None]
        return max(values) if values else None


RECORD_TYPES = {
    CME.KIND: CME,
    SolarFlare.KIND: SolarFlare,
    InterplanetaryShock.KIND: InterplanetaryShock,
    GeomagneticStorm.KIND: GeomagneticStorm,
}


def parse_records(kind: str, payloads) -> list:
    """Build typed records of `kind` from a list of raw DONKI dicts."""
    record_type = RECORD_TYPES[kind]
    return [record_type.from_donki(item) for item in _as_dicts(payloads)]
