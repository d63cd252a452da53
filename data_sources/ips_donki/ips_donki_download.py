from common.donki import download_donki
from event_engine.records import InterplanetaryShock, parse_records

DONKI_IPS_ENDPOINT = "IPS"


def download_ips(start_date, end_date, session=None):
    """
    Fetch DONKI interplanetary shocks observed in the date range.
    """
    payload = download_donki(
        DONKI_IPS_ENDPOINT, start_date, end_date, log_name="IPS", session=session
    )
    return parse_records(InterplanetaryShock.KIND, payload)
