from space_weather_api import SpaceWeatherAPI
from data_sources.xray_flux.xray_flux_download import download_xray_flux
from data_sources.xray_flux.xray_flux_plot import plot_xray_flux


class XRayFluxDataSource(SpaceWeatherAPI):
    """
    Realtime GOES X-ray flux. SWPC only serves a rolling window, so the
    configured days only trim the returned frame.
    """

    def __init__(self, days=2, today=None, session=None):
        super().__init__(days, today=today, session=session)

    def _download_impl(self):
        df = download_xray_flux(session=self.session)
        if df.empty:
            return df
        dates = df["time_tag"].dt.date
        return df[(dates >= self.start_date) & (dates <= self.end_date)].reset_index(drop=True)

    def plot(self, df):
        plot_xray_flux(df)
