from common.donki import download_donki
from event_engine.records import SolarFlare, parse_records

DONKI_FLARE_ENDPOINT = "FLR"
VALID_CLASSES = {"A", "B", "C", "M", "X"}


def download_flares(start_date, end_date, session=None):
    """
    Fetch NASA DONKI solar flare events for the provided date range.

    Flares whose class letter is not one of A/B/C/M/X are kept; the
    letter is only used for plotting.
    """
    payload = download_donki(
        DONKI_FLARE_ENDPOINT, start_date, end_date, log_name="Solar Flare", session=session
    )
    return parse_records(SolarFlare.KIND, payload)
