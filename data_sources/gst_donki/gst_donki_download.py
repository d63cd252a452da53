from common.donki import download_donki
from event_engine.records import GeomagneticStorm, parse_records

DONKI_GST_ENDPOINT = "GST"


def download_gst(start_date, end_date, session=None):
    """
    Fetch DONKI geomagnetic storms, each with its Kp index readings.
    """
    payload = download_donki(
        DONKI_GST_ENDPOINT, start_date, end_date, log_name="GST", session=session
    )
    return parse_records(GeomagneticStorm.KIND, payload)
