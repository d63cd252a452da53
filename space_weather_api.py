from dataclasses import dataclass
from datetime import date, datetime, timedelta

import pandas as pd


def format_date(value):
    """
    Format datetime/date objects as 'YYYY-Mon-DD'.
    """
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.strftime("%Y-%b-%d")
    return str(value)


def format_timestamp(value, tz="UTC"):
    """
    Render a DONKI/NOAA timestamp string as 'YYYY-Mon-DD HH:MM TZ'.

    Unparsable or missing values come back as '-' so callers can print
    them without checking.
    """
    if value is None or value == "":
        return "-"
    ts = pd.to_datetime(value, errors="coerce", utc=True)
    if pd.isna(ts):
        return str(value)
    if tz and tz != "UTC":
        ts = ts.tz_convert(tz)
    return f"{ts.strftime('%Y-%b-%d %H:%M')} {ts.tzname() or tz}"


@dataclass(frozen=True)
class FetchWindow:
    """
    Inclusive start/end date range a refresh cycle requests from a feed.

    `FetchWindow.from_days` accepts the same forms as `SpaceWeatherAPI`:

        1. Integer n
           Fetch data from (today - n + 1) through today.

        2. Single date object
           Fetch data from that date through today.

        3. Tuple of (date, date)
           Explicit start and end dates.

        4. Tuple of (date, timedelta)
           Start at the given date and extend for the given duration.
    """

    start: date
    end: date

    @classmethod
    def from_days(cls, days, today=None):
        today = today or date.today()

        if isinstance(days, bool):
            raise TypeError("days must not be a boolean.")

        if isinstance(days, int):
            if days <= 0:
                raise ValueError("Integer days must be positive.")
            return cls(today - timedelta(days=days - 1), today)

        if isinstance(days, datetime):
            days = days.date()

        if isinstance(days, date):
            if days > today:
                raise ValueError("Start date cannot be after today.")
            return cls(days, today)

        if isinstance(days, tuple):
            if len(days) != 2:
                raise ValueError("Tuple days argument must have length 2.")

            first, second = days
            if isinstance(first, date) and isinstance(second, date):
                if first > second:
                    raise ValueError("Start date cannot be after end date.")
                return cls(first, second)

            if isinstance(first, date) and isinstance(second, timedelta):
                end = first + second
                if first > end:
                    raise ValueError("Start date cannot be after computed end date.")
                return cls(first, end)

            raise ValueError(
                "Tuple days argument must be either (date, date) or (date, timedelta)."
            )

        raise TypeError(
            "days must be an integer, a date, a tuple of dates, or a tuple of (date, timedelta)."
        )

    @classmethod
    def lookback(cls, days_ago, today=None):
        """Window from `days_ago` days before today through today."""
        today = today or date.today()
        return cls(today - timedelta(days=days_ago), today)

    def extended(self, extra_days):
        """Same end date, start moved `extra_days` earlier."""
        return FetchWindow(self.start - timedelta(days=extra_days), self.end)

    def iter_days(self):
        """
        Yield every day from start to end inclusive.
        """
        current = self.start
        while current <= self.end:
            yield current
            current += timedelta(days=1)

    def range_str(self):
        return f"{format_date(self.start)} -> {format_date(self.end)}"


class SpaceWeatherAPI:
    """
    Base class for all space weather data sources.

    Retries live in `common.http`; a data source only describes what to
    fetch for its window and how to plot the result.

    Subclasses must implement:
        _download_impl()
        plot(records)
    """

    def __init__(self, days, today=None, session=None):
        self.window = FetchWindow.from_days(days, today=today)
        self.session = session

    @property
    def start_date(self):
        return self.window.start

    @property
    def end_date(self):
        return self.window.end

    def download(self):
        """
        Run the subclass download. Fetch errors propagate to the caller.
        """
        return self._download_impl()

    def _download_impl(self):
        raise NotImplementedError("Subclasses must implement _download_impl().")

    def plot(self, records):
        raise NotImplementedError("Subclasses must implement plot().")

    def iter_days(self):
        return self.window.iter_days()

    def range_str(self):
        """
        Human readable date range for logging or debugging.
        """
        return self.window.range_str()
