import matplotlib.pyplot as plt
import pandas as pd

from space_weather_api import SpaceWeatherAPI
from data_sources.gst_donki.gst_donki_download import download_gst

# NOAA G-scale storm levels start at Kp 5.
STORM_KP_THRESHOLD = 5


class GeomagneticStormDataSource(SpaceWeatherAPI):
    """NASA DONKI GST feed exposed through the SpaceWeatherAPI."""

    def _download_impl(self):
        return download_gst(self.start_date, self.end_date, session=self.session)

    def plot(self, records):
        """
        Step plot of every Kp reading attached to the storms.
        """
        rows = [
            {"observedTime": kp.observed_time, "kp": kp.kp_value}
            for storm in records
            for kp in storm.kp_indices
        ]
        df = pd.DataFrame(rows, columns=["observedTime", "kp"])
        df["observedTime"] = pd.to_datetime(df["observedTime"], errors="coerce", utc=True)
        df = df.dropna().sort_values("observedTime")
        if df.empty:
            raise ValueError("No Kp readings available to plot.")

        plt.figure(figsize=(10, 4))
        plt.step(df["observedTime"], df["kp"], where="post")
        plt.axhline(STORM_KP_THRESHOLD, color="red", alpha=0.4, linestyle="--")
        plt.ylim(0, 9)
        plt.title(f"Geomagnetic Storm Kp ({self.range_str()})")
        plt.xlabel("Time (UTC)")
        plt.ylabel("Kp")
        plt.grid(True, alpha=0.3)
        plt.tight_layout()
        plt.show()
