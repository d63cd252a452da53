from common.donki import download_donki
from event_engine.records import CME, parse_records

DONKI_CME_ENDPOINT = "CME"


def download_cme(start_date, end_date, session=None):
    """
    Retrieve DONKI CME records (with their nested analyses and ENLIL runs)
    for the provided date range.

    Parameters
    ----------
    start_date : datetime.date
    end_date : datetime.date

    Returns
    -------
    list[CME]
        Typed records in feed order. Fetch errors propagate.
    """
    payload = download_donki(
        DONKI_CME_ENDPOINT, start_date, end_date, log_name="CME", session=session
    )
    return parse_records(CME.KIND, payload)
