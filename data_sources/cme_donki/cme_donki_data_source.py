from space_weather_api import SpaceWeatherAPI
from data_sources.cme_donki.cme_donki_download import download_cme
from data_sources.cme_donki.cme_donki_plot import plot_cme


class CMEDataSource(SpaceWeatherAPI):
    """
    Access NASA's DONKI CME feed through the SpaceWeatherAPI.
    """

    def _download_impl(self):
        """
        Download CME entries for the configured time range.
        """
        return download_cme(self.start_date, self.end_date, session=self.session)

    def plot(self, records):
        """
        Visualize CME counts per day, split by Earth impact score.
        """
        plot_cme(records)
