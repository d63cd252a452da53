import matplotlib.pyplot as plt
import pandas as pd

from data_sources.solar_flare.solar_flare_download import VALID_CLASSES

COLOR_MAP = {"A": "gray", "B": "blue", "C": "green", "M": "orange", "X": "red"}


def flare_frame(flares) -> pd.DataFrame:
    df = pd.DataFrame(
        {
            "flrID": [flare.flr_id for flare in flares],
            "beginTime": [flare.begin_time for flare in flares],
            "classLetter": [flare.class_letter or "" for flare in flares],
            "linkedCMEs": [len(flare.associated_cmes) for flare in flares],
        }
    )
    df["beginTime"] = pd.to_datetime(df["beginTime"], errors="coerce", utc=True)
    df = df.dropna(subset=["beginTime"])
    return df[df["classLetter"].isin(VALID_CLASSES)]


def plot_flares(flares, title_suffix: str = ""):
    """
    Plot flare frequency as daily bar counts colored by class.
    """
    df = flare_frame(flares)
    if df.empty:
        raise ValueError("No solar flare data available to plot.")

    counts = (
        df.groupby([df["beginTime"].dt.date, "classLetter"])
        .size()
        .unstack(fill_value=0)
        .reindex(columns=sorted(COLOR_MAP.keys()), fill_value=0)
    )

    full_range = pd.date_range(
        df["beginTime"].dt.floor("D").min(),
        df["beginTime"].dt.floor("D").max(),
        freq="D",
    )
    counts = counts.reindex(full_range.date, fill_value=0)
    counts.index = [d.strftime("%Y-%b-%d") for d in counts.index]

    counts.plot(
        kind="bar",
        stacked=True,
        figsize=(12, 6),
        color=[COLOR_MAP[key] for key in counts.columns],
    )

    plt.xlabel("Date")
    plt.ylabel("Number of Flares")
    suffix = f" ({title_suffix})" if title_suffix else ""
    plt.title(f"Solar Flare Counts by Class{suffix}")
    plt.legend(title="Flare Class")
    plt.tight_layout()
    plt.show()
