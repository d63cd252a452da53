"""
One refresh cycle: fetch, enrich, correlate, rank.

Each cycle owns a fresh RawEventStore, so a CME window fetched for the
CME panels is reused for flare correlation within the same cycle but
never across cycles. Shocks are correlated against a longer CME window
because their causative CME usually left the Sun days earlier.

A fetch failure in one section is recorded on that section only; the
other sections still render.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, List, Optional, Tuple

from common.http import FetchError
from common.logging import log
from data_sources.cme_donki.cme_donki_data_source import CMEDataSource
from data_sources.gst_donki.gst_donki_data_source import GeomagneticStormDataSource
from data_sources.ips_donki.ips_donki_data_source import InterplanetaryShockDataSource
from data_sources.proton_flux.proton_flux_download import download_proton_flux, s_scale_level
from data_sources.solar_flare.solar_flare_data_source import SolarFlareDataSource
from data_sources.xray_flux.xray_flux_download import classify_xray_flux, download_xray_flux
from event_engine.correlation import correlate
from event_engine.enrichment import enrich_all
from event_engine.event_store import RawEventStore
from event_engine.ranking import partition, sort_by_time_desc
from event_engine.records import (
    CME,
    EnhancedCME,
    GeomagneticStorm,
    InterplanetaryShock,
    SolarFlare,
)
from space_weather_api import FetchWindow

EVENT_LOOKBACK_DAYS = 7
SHOCK_CME_LOOKBACK_DAYS = 10

EventFeed = Callable[[str, FetchWindow], List]


DATA_SOURCES = {
    CME.KIND: CMEDataSource,
    SolarFlare.KIND: SolarFlareDataSource,
    InterplanetaryShock.KIND: InterplanetaryShockDataSource,
    GeomagneticStorm.KIND: GeomagneticStormDataSource,
}


class DonkiEventFeed:
    """Default feed: one DONKI download per (kind, window)."""

    def __init__(self, session=None):
        self.session = session

    def __call__(self, kind: str, window: FetchWindow) -> List:
        source = DATA_SOURCES[kind](days=(window.start, window.end), session=self.session)
        return source.download()


class NoaaFluxFeed:
    """Default flux feed backed by the SWPC realtime JSON products."""

    def __init__(self, session=None):
        self.session = session

    def xray(self):
        return download_xray_flux(session=self.session)

    def proton(self):
        return download_proton_flux(session=self.session)


@dataclass(frozen=True)
class SectionState:
    records: Tuple = ()
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class FluxStatus:
    xray_flux: Optional[float] = None
    xray_class: Optional[str] = None
    xray_time: Optional[str] = None
    proton_flux: Optional[float] = None
    proton_level: Optional[str] = None
    proton_description: Optional[str] = None
    proton_time: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class DashboardSnapshot:
    earth_directed: SectionState
    other_cmes: SectionState
    flares: SectionState
    shocks: SectionState
    storms: SectionState
    flux: Optional[FluxStatus] = None

    @property
    def errors(self) -> List[str]:
        sections = (self.earth_directed, self.other_cmes, self.flares, self.shocks, self.storms)
        messages = [section.error for section in sections if section.error]
        if self.flux is not None and self.flux.error:
            messages.append(self.flux.error)
        return list(dict.fromkeys(messages))


class RefreshCycle:
    """Loaders for a single cycle. Fetch errors propagate unmodified."""

    def __init__(self, feed: Optional[EventFeed] = None, today: Optional[date] = None):
        self.feed = feed or DonkiEventFeed()
        self.store = RawEventStore()
        self.event_window = FetchWindow.lookback(EVENT_LOOKBACK_DAYS, today=today)
        self.shock_cme_window = self.event_window.extended(
            SHOCK_CME_LOOKBACK_DAYS - EVENT_LOOKBACK_DAYS
        )

    def fetch(self, kind: str, window: FetchWindow) -> Tuple:
        if self.store.has(kind, window):
            return self.store.get(kind, window)
        records = self.store.put(kind, window, self.feed(kind, window))
        log("INFO", f"{len(records)} records for {window.range_str()}", kind)
        return records

    def load_cmes(self, window: Optional[FetchWindow] = None) -> List[EnhancedCME]:
        return enrich_all(self.fetch(CME.KIND, window or self.event_window))

    def load_flares(self) -> List[SolarFlare]:
        cmes = self.load_cmes()
        flares = correlate(self.fetch(SolarFlare.KIND, self.event_window), cmes)
        return sort_by_time_desc(flares, "begin_time")

    def load_shocks(self) -> List[InterplanetaryShock]:
        cmes = self.load_cmes(self.shock_cme_window)
        shocks = correlate(self.fetch(InterplanetaryShock.KIND, self.event_window), cmes)
        return sort_by_time_desc(shocks, "event_time")

    def load_storms(self) -> List[GeomagneticStorm]:
        return sort_by_time_desc(self.fetch(GeomagneticStorm.KIND, self.event_window), "start_time")


def load_flux_status(flux_feed) -> FluxStatus:
    values = {}
    errors = []
    try:
        xray = flux_feed.xray()
        if not xray.empty:
            latest = xray.iloc[-1]
            values.update(
                xray_flux=float(latest["flux"]),
                xray_class=classify_xray_flux(latest["flux"]),
                xray_time=latest["time_tag"].isoformat(),
            )
    except FetchError as exc:
        errors.append(str(exc))

    try:
        proton = flux_feed.proton()
        if not proton.empty:
            latest = proton.iloc[-1]
            level = s_scale_level(latest["flux"])
            values.update(
                proton_flux=float(latest["flux"]),
                proton_level=level.level if level else None,
                proton_description=level.description if level else None,
                proton_time=latest["time_tag"].isoformat(),
            )
    except FetchError as exc:
        errors.append(str(exc))

    return FluxStatus(error="; ".join(errors) or None, **values)


def _section(name: str, loader: Callable[[], List]) -> SectionState:
    try:
        return SectionState(records=tuple(loader()))
    except FetchError as exc:
        log("WARN", f"Section unavailable: {exc}", name)
        return SectionState(error=str(exc))


def refresh(
    feed: Optional[EventFeed] = None,
    today: Optional[date] = None,
    flux_feed=None,
) -> DashboardSnapshot:
    """
    Run one synchronous refresh cycle and return an immutable snapshot.

    Callers must not overlap cycles; the console loop runs them one after
    another.
    """
    cycle = RefreshCycle(feed, today=today)

    try:
        earth_directed, other = partition(cycle.load_cmes())
        cme_sections = (SectionState(records=tuple(earth_directed)), SectionState(records=tuple(other)))
    except FetchError as exc:
        log("WARN", f"Section unavailable: {exc}", CME.KIND)
        cme_sections = (SectionState(error=str(exc)), SectionState(error=str(exc)))

    snapshot = DashboardSnapshot(
        earth_directed=cme_sections[0],
        other_cmes=cme_sections[1],
        flares=_section(SolarFlare.KIND, cycle.load_flares),
        shocks=_section(InterplanetaryShock.KIND, cycle.load_shocks),
        storms=_section(GeomagneticStorm.KIND, cycle.load_storms),
        flux=load_flux_status(flux_feed) if flux_feed is not None else None,
    )
    cycle.store.clear()
    return snapshot
