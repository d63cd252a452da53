import sys
from datetime import date, timedelta
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from common import donki
from donki_samples import cme
from data_sources.cme_donki.cme_donki_data_source import CMEDataSource
from event_engine.event_store import RawEventStore
from space_weather_api import FetchWindow, format_date, format_timestamp

TODAY = date(2024, 3, 8)


@pytest.mark.parametrize(
    "days, expected",
    [
        (1, FetchWindow(TODAY, TODAY)),
        (7, FetchWindow(date(2024, 3, 2), TODAY)),
        (date(2024, 3, 1), FetchWindow(date(2024, 3, 1), TODAY)),
        ((date(2024, 2, 1), date(2024, 2, 3)), FetchWindow(date(2024, 2, 1), date(2024, 2, 3))),
        ((date(2024, 2, 1), timedelta(days=2)), FetchWindow(date(2024, 2, 1), date(2024, 2, 3))),
    ],
)
def test_window_forms(days, expected):
    assert FetchWindow.from_days(days, today=TODAY) == expected


@pytest.mark.parametrize(
    "days, error",
    [
        (0, ValueError),
        (date(2024, 3, 9), ValueError),
        ((date(2024, 3, 2), date(2024, 3, 1)), ValueError),
        ((date(2024, 3, 2),), ValueError),
        ("7", TypeError),
        (True, TypeError),
    ],
)
def test_invalid_windows(days, error):
    with pytest.raises(error):
        FetchWindow.from_days(days, today=TODAY)


def test_lookback_and_extension():
    window = FetchWindow.lookback(7, today=TODAY)

    assert window == FetchWindow(date(2024, 3, 1), TODAY)
    assert window.extended(3) == FetchWindow(date(2024, 2, 27), TODAY)
    assert len(list(window.iter_days())) == 8
    assert window.range_str() == "2024-Mar-01 -> 2024-Mar-08"


def test_formatting_helpers():
    assert format_date(date(2024, 3, 1)) == "2024-Mar-01"
    assert format_timestamp("2024-03-01T12:00Z") == "2024-Mar-01 12:00 UTC"
    assert format_timestamp(None) == "-"
    assert format_timestamp("soon") == "soon"


def test_raw_event_store_is_keyed_by_kind_and_window():
    store = RawEventStore()
    week = FetchWindow.lookback(7, today=TODAY)

    store.put("CME", week, ["a", "b"])
    store.put("CME", week.extended(3), ["a", "b", "c"])

    assert store.get("CME", week) == ("a", "b")
    assert store.get("FLR", week) == ()
    assert store.kinds() == ["CME"]
    assert len(store) == 5
    store.clear()
    assert not store.has("CME", week)


def test_cme_data_source_downloads_typed_records(monkeypatch):
    requests_seen = []

    def fake_get_json(url, params=None, **kwargs):
        requests_seen.append((url, params))
        return cme("2024-03-01T00:00:00-CME-001")

    monkeypatch.setattr(donki, "http_get_json", fake_get_json)
    monkeypatch.delenv("NASA_API_KEY", raising=False)

    records = CMEDataSource(days=(date(2024, 3, 1), TODAY)).download()

    assert [record.activity_id for record in records] == ["2024-03-01T00:00:00-CME-001"]
    url, params = requests_seen[0]
    assert url.endswith("/CME")
    assert params == {"startDate": "2024-03-01", "endDate": "2024-03-08"}


def test_donki_empty_body_is_no_records(monkeypatch):
    monkeypatch.setattr(donki, "http_get_json", lambda url, **kwargs: None)

    assert donki.download_donki("FLR", TODAY, TODAY) == []
