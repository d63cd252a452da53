from typing import Optional

import pandas as pd

from common.http import http_get_json

SWPC_XRAY_URL = "https://services.swpc.noaa.gov/json/goes/primary/xrays-1-minute.json"
LONG_BAND = "0.1-0.8nm"

# Lower bound of each flare class for the 0.1-0.8 nm band, in W/m^2.
XRAY_FLUX_THRESHOLDS = [
    ("X", 1e-4),
    ("M", 1e-5),
    ("C", 1e-6),
    ("B", 1e-7),
    ("A", 1e-8),
]


def classify_xray_flux(flux: Optional[float]) -> Optional[str]:
    """
    Flare class letter for a long-band flux. Anything below the B
    threshold reads as A.
    """
    if flux is None or pd.isna(flux):
        return None
    for name, threshold in XRAY_FLUX_THRESHOLDS:
        if flux >= threshold:
            return name
    return "A"


def normalize_xray_flux(payload) -> pd.DataFrame:
    """
    Keep the long band only, parse times and sort oldest first.
    """
    df = pd.DataFrame(payload if isinstance(payload, list) else [])
    if df.empty or not {"time_tag", "flux", "energy"}.issubset(df.columns):
        return pd.DataFrame(columns=["time_tag", "flux", "energy", "flare_class"])

    df = df[df["energy"] == LONG_BAND].copy()
    df["time_tag"] = pd.to_datetime(df["time_tag"], errors="coerce", utc=True)
    df["flux"] = pd.to_numeric(df["flux"], errors="coerce")
    df = df.dropna(subset=["time_tag", "flux"]).sort_values("time_tag")
    df["flare_class"] = df["flux"].map(classify_xray_flux)
    return df[["time_tag", "flux", "energy", "flare_class"]].reset_index(drop=True)


def download_xray_flux(session=None) -> pd.DataFrame:
    payload = http_get_json(SWPC_XRAY_URL, timeout=30, log_name="X-Ray Flux", session=session)
    return normalize_xray_flux(payload)
