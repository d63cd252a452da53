import matplotlib.pyplot as plt

from space_weather_api import SpaceWeatherAPI
from data_sources.proton_flux.proton_flux_download import (
    PROTON_FLUX_S_SCALE,
    download_proton_flux,
)


class ProtonFluxDataSource(SpaceWeatherAPI):
    """Realtime GOES >=10 MeV proton flux."""

    def __init__(self, days=2, today=None, session=None):
        super().__init__(days, today=today, session=session)

    def _download_impl(self):
        df = download_proton_flux(session=self.session)
        if df.empty:
            return df
        dates = df["time_tag"].dt.date
        return df[(dates >= self.start_date) & (dates <= self.end_date)].reset_index(drop=True)

    def plot(self, df):
        if df.empty:
            raise ValueError("No proton flux data available to plot.")

        fig, ax = plt.subplots(1, 1, figsize=(12, 5))
        ax.plot(df["time_tag"], df["flux"], label=">=10 MeV")
        for level in PROTON_FLUX_S_SCALE:
            ax.axhline(level.threshold, color="red", alpha=0.2, linestyle="--")
            ax.text(ax.get_xlim()[0], level.threshold, f" {level.level}", verticalalignment="bottom")
        ax.set_yscale("log")
        ax.set_ylabel("pfu")
        ax.set_title("GOES Integral Proton Flux")
        ax.legend()
        ax.grid(True, which="both", ls="--", alpha=0.3)
        fig.autofmt_xdate()
        plt.tight_layout()
        plt.show()
