"""Shared access to the NASA DONKI web service."""

from __future__ import annotations

import os

from common.http import http_get_json

DONKI_API_BASE_URL = os.environ.get(
    "DONKI_API_BASE_URL", "https://kauai.ccmc.gsfc.nasa.gov/DONKI/WS/get"
)
DONKI_TIMEOUT_SECONDS = 30


def donki_url(endpoint: str) -> str:
    return f"{DONKI_API_BASE_URL.rstrip('/')}/{endpoint}"


def download_donki(endpoint, start_date=None, end_date=None, *, log_name=None, session=None):
    """
    Fetch raw DONKI records for an endpoint (CME, FLR, IPS, GST, ...).

    The service answers with a JSON list, a single object, or an empty
    body; the result is always a list of dicts.
    """
    params = {}
    if start_date is not None:
        params["startDate"] = start_date.isoformat()
    if end_date is not None:
        params["endDate"] = end_date.isoformat()
    api_key = os.environ.get("NASA_API_KEY")
    if api_key:
        params["api_key"] = api_key

    payload = http_get_json(
        donki_url(endpoint),
        params=params,
        timeout=DONKI_TIMEOUT_SECONDS,
        log_name=log_name or endpoint,
        session=session,
    )
    if payload is None:
        return []
    if isinstance(payload, list):
        return [item for item in payload if isinstance(item, dict)]
    if isinstance(payload, dict):
        return [payload]
    return []
