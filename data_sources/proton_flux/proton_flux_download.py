from typing import NamedTuple, Optional

import pandas as pd

from common.http import http_get_json

SWPC_PROTON_URL = "https://services.swpc.noaa.gov/json/goes/primary/integral-protons-1-minute.json"
ENERGY_CHANNEL = ">=10 MeV"


class SScaleLevel(NamedTuple):
    level: str
    threshold: float
    description: str


# NOAA solar radiation storm scale, >=10 MeV protons in pfu.
PROTON_FLUX_S_SCALE = [
    SScaleLevel("S5", 1e5, "Extreme"),
    SScaleLevel("S4", 1e4, "Severe"),
    SScaleLevel("S3", 1e3, "Strong"),
    SScaleLevel("S2", 1e2, "Moderate"),
    SScaleLevel("S1", 10, "Minor"),
]


def s_scale_level(flux: Optional[float]) -> Optional[SScaleLevel]:
    """Radiation storm level for a flux, or None below S1."""
    if flux is None or pd.isna(flux):
        return None
    for level in PROTON_FLUX_S_SCALE:
        if flux >= level.threshold:
            return level
    return None


def normalize_proton_flux(payload) -> pd.DataFrame:
    df = pd.DataFrame(payload if isinstance(payload, list) else [])
    if df.empty or not {"time_tag", "flux", "energy"}.issubset(df.columns):
        return pd.DataFrame(columns=["time_tag", "flux", "energy"])

    df = df[df["energy"] == ENERGY_CHANNEL].copy()
    df["time_tag"] = pd.to_datetime(df["time_tag"], errors="coerce", utc=True)
    df["flux"] = pd.to_numeric(df["flux"], errors="coerce")
    df = df.dropna(subset=["time_tag", "flux"]).sort_values("time_tag")
    return df[["time_tag", "flux", "energy"]].reset_index(drop=True)


def download_proton_flux(session=None) -> pd.DataFrame:
    payload = http_get_json(SWPC_PROTON_URL, timeout=30, log_name="Proton Flux", session=session)
    return normalize_proton_flux(payload)
