import matplotlib.pyplot as plt
import pandas as pd

from space_weather_api import SpaceWeatherAPI
from data_sources.ips_donki.ips_donki_download import download_ips


class InterplanetaryShockDataSource(SpaceWeatherAPI):
    """NASA DONKI IPS feed exposed through the SpaceWeatherAPI."""

    def _download_impl(self):
        return download_ips(self.start_date, self.end_date, session=self.session)

    def plot(self, records):
        """
        Scatter of shock times per observing location.
        """
        df = pd.DataFrame(
            {
                "eventTime": [shock.event_time for shock in records],
                "location": [shock.location or "unknown" for shock in records],
            }
        )
        df["eventTime"] = pd.to_datetime(df["eventTime"], errors="coerce", utc=True)
        df = df.dropna(subset=["eventTime"])
        if df.empty:
            raise ValueError("No interplanetary shock data available to plot.")

        plt.figure(figsize=(10, 4))
        for location, group in df.groupby("location"):
            plt.scatter(group["eventTime"], [location] * len(group), label=location)
        plt.title(f"Interplanetary Shocks ({self.range_str()})")
        plt.xlabel("Time (UTC)")
        plt.grid(True, alpha=0.3)
        plt.tight_layout()
        plt.show()
