import sys
from dataclasses import replace
from datetime import date
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import space_weather_monitor
from common.logging import _colorize_text, log
from donki_samples import analysis, cme, enlil, flare, shock, storm
from event_engine.pipeline import FluxStatus, refresh
from event_engine.records import parse_records

TODAY = date(2024, 3, 8)

PAYLOADS = {
    "CME": [
        cme(
            "CME-hit",
            start_time="2024-03-02T00:00Z",
            analyses=[analysis(most_accurate=True, enlil_list=[enlil(arrival="2024-03-04T06:00Z", earth_gb=True)])],
        ),
        cme("CME-run", start_time="2024-03-03T00:00Z", analyses=[analysis(enlil_list=[enlil(earth_gb=True)])]),
        cme("CME-far", start_time="2024-03-05T00:00Z", analyses=[analysis()], note="Far side event."),
    ],
    "FLR": [flare("FLR-1", linked=["CME-hit"], class_type="X2.1")],
    "IPS": [shock("IPS-1", linked=["CME-hit"])],
    "GST": [storm("GST-1")],
}


def feed(kind, window):
    return parse_records(kind, PAYLOADS[kind])


def test_frames_mark_high_impact_cmes():
    snapshot = refresh(feed, today=TODAY)

    frame = space_weather_monitor.earth_directed_frame(snapshot.earth_directed.records)

    assert frame["activityID"].tolist() == ["CME-hit", "CME-run"]
    assert frame[""].tolist() == ["*", "*"]
    assert frame["score"].tolist() == ["1", "2"]
    assert frame["est. arrival"].tolist()[0] == "2024-Mar-04 06:00 UTC"
    assert frame["impacts"].tolist()[0] == "Earth Geospace"


def test_other_frames():
    snapshot = refresh(feed, today=TODAY)

    other = space_weather_monitor.other_cme_frame(snapshot.other_cmes.records)
    flares = space_weather_monitor.flare_frame(snapshot.flares.records)
    shocks = space_weather_monitor.shock_frame(snapshot.shocks.records)
    storms = space_weather_monitor.storm_frame(snapshot.storms.records)

    assert other["note"].tolist() == ["Far side event."]
    assert flares["linked CMEs"].tolist() == ["CME-hit (score 1)"]
    assert shocks["causative CME"].tolist() == ["CME-hit"]
    assert storms["max Kp"].tolist() == [6.0]


def test_print_snapshot_reports_sections_and_alerts(capsys):
    snapshot = refresh(feed, today=TODAY)

    space_weather_monitor.print_snapshot(snapshot)

    out = capsys.readouterr().out
    assert "=== Potentially Earth-Directed CMEs ===" in out
    assert "[EARTH] CME-hit ENLIL arrival 2024-Mar-04 06:00 UTC" in out
    assert "CME-run ENLIL" not in out


def test_print_snapshot_shows_section_errors(capsys):
    def failing(kind, window):
        if kind == "GST":
            raise space_weather_monitor.FetchError("GST feed down")
        return feed(kind, window)

    snapshot = refresh(failing, today=TODAY)
    space_weather_monitor.print_snapshot(snapshot)

    out = capsys.readouterr().out
    assert "[ERROR] GST feed down" in out


def test_print_snapshot_flux_summary(capsys):
    snapshot = refresh(feed, today=TODAY)
    snapshot = replace(
        snapshot,
        flux=FluxStatus(
            xray_flux=3.4e-5,
            xray_class="M",
            xray_time="2024-03-08T00:01:00+00:00",
            proton_flux=4.0,
        ),
    )

    space_weather_monitor.print_snapshot(snapshot)

    out = capsys.readouterr().out
    assert "X-ray flux: 3.40e-05 W/m^2 (M-class) at 2024-Mar-08 00:01 UTC" in out
    assert "(below S1)" in out


def test_parse_args():
    args = space_weather_monitor.parse_args(["--today", "2024-03-08", "--no-flux", "--interval", "60"])

    assert args.today == TODAY
    assert args.no_flux
    assert args.interval == 60
    assert not args.watch


def test_main_runs_a_single_cycle(monkeypatch, capsys):
    calls = []

    def fake_refresh(today=None, flux_feed=None):
        calls.append((today, flux_feed))
        return refresh(feed, today=TODAY)

    monkeypatch.setattr(space_weather_monitor, "refresh", fake_refresh)
    monkeypatch.setattr(space_weather_monitor, "enable_colored_logging", lambda: None)

    space_weather_monitor.main(["--today", "2024-03-08", "--no-flux"])

    assert calls == [(TODAY, None)]
    assert "[OK] Refresh complete." in capsys.readouterr().out


def test_log_format_and_colorizing(capsys):
    log("WARN", "slow feed", "FLR")

    assert capsys.readouterr().out == "[WARN] [FLR] slow feed\n"
    assert _colorize_text("[EARTH] hit").startswith("[\033[35mEARTH")
    assert _colorize_text("no label [OK]") == "no label [OK]"
