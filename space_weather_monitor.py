from __future__ import annotations

import argparse
import math
import os
import time
from datetime import date, datetime

import pandas as pd

from common.http import FetchError
from common.logging import enable_colored_logging, log
from data_sources.cme_donki.cme_donki_data_source import CMEDataSource
from data_sources.gst_donki.gst_donki_data_source import GeomagneticStormDataSource
from data_sources.ips_donki.ips_donki_data_source import InterplanetaryShockDataSource
from data_sources.proton_flux.proton_flux_data_source import ProtonFluxDataSource
from data_sources.solar_flare.solar_flare_data_source import SolarFlareDataSource
from data_sources.xray_flux.xray_flux_data_source import XRayFluxDataSource
from event_engine.pipeline import (
    EVENT_LOOKBACK_DAYS,
    DashboardSnapshot,
    NoaaFluxFeed,
    SectionState,
    refresh,
)
from space_weather_api import FetchWindow, format_timestamp

REFRESH_INTERVAL_SECONDS = int(os.environ.get("SPACE_WEATHER_REFRESH_SECONDS", 15 * 60))
HIGHLIGHT_MAX_SCORE = 2
NOTE_WIDTH = 100


def _score_text(score) -> str:
    return "-" if score is None or math.isinf(score) else str(int(score))


def _truncate(text, width=NOTE_WIDTH) -> str:
    if not text:
        return ""
    return text if len(text) <= width else text[: width - 3] + "..."


def earth_directed_frame(cmes, tz="UTC") -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "": "*" if cme.earth_impact_score <= HIGHLIGHT_MAX_SCORE else "",
                "score": _score_text(cme.earth_impact_score),
                "activityID": cme.activity_id,
                "start": format_timestamp(cme.start_time, tz),
                "est. arrival": format_timestamp(cme.display_enlil_arrival_time, tz),
                "source": cme.source_location or "",
                "speed km/s": cme.display_analysis_speed,
                "half angle": cme.display_analysis_half_angle,
                "type": cme.display_analysis_type or "",
                "duration h": cme.display_enlil_duration,
                "impacts": ", ".join(cme.display_enlil_impact_locations or ()),
            }
            for cme in cmes
        ]
    )


def other_cme_frame(cmes, tz="UTC") -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "activityID": cme.activity_id,
                "start": format_timestamp(cme.start_time, tz),
                "source": cme.source_location or "",
                "speed km/s": cme.display_analysis_speed,
                "half angle": cme.display_analysis_half_angle,
                "note": _truncate(cme.note),
            }
            for cme in cmes
        ]
    )


def flare_frame(flares, tz="UTC") -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "class": flare.class_type or "",
                "begin": format_timestamp(flare.begin_time, tz),
                "peak": format_timestamp(flare.peak_time, tz),
                "end": format_timestamp(flare.end_time, tz),
                "region": flare.source_location or "",
                "AR": flare.active_region_num,
                "linked CMEs": ", ".join(
                    f"{cme.activity_id} (score {_score_text(cme.earth_impact_score)})"
                    for cme in flare.associated_cmes
                ),
            }
            for flare in flares
        ]
    )


def shock_frame(shocks, tz="UTC") -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "ipsID": shock.ips_id,
                "time": format_timestamp(shock.event_time, tz),
                "location": shock.location or "",
                "instruments": ", ".join(shock.instruments),
                "causative CME": shock.associated_cme_activity_id or "",
                "CME start": format_timestamp(shock.associated_cme_start_time, tz),
                "CME speed km/s": shock.associated_cme_speed,
            }
            for shock in shocks
        ]
    )


def storm_frame(storms, tz="UTC") -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "gstID": storm.gst_id,
                "start": format_timestamp(storm.start_time, tz),
                "max Kp": storm.max_kp,
                "Kp readings": len(storm.kp_indices),
            }
            for storm in storms
        ]
    )


def _print_section(title: str, section: SectionState, frame_builder, tz: str) -> None:
    print(f"\n=== {title} ===")
    if section.error:
        log("ERROR", section.error)
        return
    if not section.records:
        print("No events found for the selected period.")
        return
    print(frame_builder(section.records, tz).to_string(index=False))


def print_snapshot(snapshot: DashboardSnapshot, tz: str = "UTC") -> None:
    if snapshot.flux is not None:
        flux = snapshot.flux
        print("\n=== Current conditions ===")
        if flux.xray_flux is not None:
            print(f"X-ray flux: {flux.xray_flux:.2e} W/m^2 ({flux.xray_class}-class) at {format_timestamp(flux.xray_time, tz)}")
        if flux.proton_flux is not None:
            level = f"{flux.proton_level} {flux.proton_description}" if flux.proton_level else "below S1"
            print(f"Proton flux >=10 MeV: {flux.proton_flux:.2f} pfu ({level}) at {format_timestamp(flux.proton_time, tz)}")
        if flux.error:
            log("ERROR", flux.error)

    _print_section("Potentially Earth-Directed CMEs", snapshot.earth_directed, earth_directed_frame, tz)
    _print_section("Solar Flares", snapshot.flares, flare_frame, tz)
    _print_section("Other CMEs", snapshot.other_cmes, other_cme_frame, tz)
    _print_section("Geomagnetic Storms", snapshot.storms, storm_frame, tz)
    _print_section("Interplanetary Shocks", snapshot.shocks, shock_frame, tz)

    for cme in snapshot.earth_directed.records:
        if cme.earth_impact_score == 1:
            log(
                "EARTH",
                f"{cme.activity_id} ENLIL arrival {format_timestamp(cme.display_enlil_arrival_time, tz)}",
            )


def _plot_snapshot(snapshot: DashboardSnapshot, today: date | None, with_flux: bool) -> None:
    window = FetchWindow.lookback(EVENT_LOOKBACK_DAYS, today)
    week = (window.start, window.end)
    panels = [
        (CMEDataSource(week), snapshot.earth_directed.records + snapshot.other_cmes.records),
        (SolarFlareDataSource(week), snapshot.flares.records),
        (InterplanetaryShockDataSource(week), snapshot.shocks.records),
        (GeomagneticStormDataSource(week), snapshot.storms.records),
    ]
    for source, records in panels:
        try:
            source.plot(records)
        except ValueError as exc:
            log("SKIP", str(exc))

    if not with_flux:
        return
    for source in (XRayFluxDataSource(today=today), ProtonFluxDataSource(today=today)):
        try:
            source.plot(source.download())
        except (FetchError, ValueError) as exc:
            log("SKIP", str(exc))


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Rank recent CMEs by Earth impact and link flares and shocks to them."
    )
    parser.add_argument(
        "--today",
        type=lambda text: datetime.strptime(text, "%Y-%m-%d").date(),
        default=None,
        help="End date of the fetch windows (YYYY-MM-DD, default: today).",
    )
    parser.add_argument("--tz", default="UTC", help="Time zone for displayed timestamps.")
    parser.add_argument("--watch", action="store_true", help="Keep refreshing until interrupted.")
    parser.add_argument(
        "--interval",
        type=int,
        default=REFRESH_INTERVAL_SECONDS,
        help="Seconds between refresh cycles with --watch.",
    )
    parser.add_argument("--no-flux", action="store_true", help="Skip the NOAA X-ray and proton flux feeds.")
    parser.add_argument("--plot", action="store_true", help="Show event and flux plots after the first cycle.")
    return parser.parse_args(argv)


def run_cycle(today: date | None, tz: str, with_flux: bool) -> DashboardSnapshot:
    snapshot = refresh(today=today, flux_feed=NoaaFluxFeed() if with_flux else None)
    print_snapshot(snapshot, tz)
    if snapshot.errors:
        log("WARN", f"{len(snapshot.errors)} feed(s) failed this cycle.")
    else:
        log("OK", "Refresh complete.")
    return snapshot


def main(argv=None) -> None:
    enable_colored_logging()
    args = parse_args(argv)

    snapshot = run_cycle(args.today, args.tz, not args.no_flux)
    if args.plot:
        _plot_snapshot(snapshot, args.today, not args.no_flux)

    while args.watch:
        log("INFO", f"Next refresh in {args.interval}s (Ctrl-C to stop).")
        try:
            time.sleep(args.interval)
        except KeyboardInterrupt:
            break
        run_cycle(args.today, args.tz, not args.no_flux)


if __name__ == "__main__":
    main()
