from space_weather_api import SpaceWeatherAPI
from data_sources.solar_flare.solar_flare_download import download_flares
from data_sources.solar_flare.solar_flare_plot import plot_flares


class SolarFlareDataSource(SpaceWeatherAPI):
    """
    NASA DONKI FLR feed exposed through the SpaceWeatherAPI.
    """

    def _download_impl(self):
        return download_flares(self.start_date, self.end_date, session=self.session)

    def plot(self, records):
        plot_flares(records, title_suffix=self.range_str())
