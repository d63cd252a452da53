import matplotlib.dates as mdates
import matplotlib.pyplot as plt
import pandas as pd

from data_sources.xray_flux.xray_flux_download import XRAY_FLUX_THRESHOLDS

CLASS_COLORS = {
    "X": "#FF00FF",
    "M": "#FF0000",
    "C": "#FFA500",
    "B": "#FFFF00",
    "A": "#ADD8E6",
}


def _add_xray_flare_class_grid(ax):
    for label, level in XRAY_FLUX_THRESHOLDS:
        ax.axhline(level, color=CLASS_COLORS[label], alpha=0.4, linestyle="--")
        ax.text(
            ax.get_xlim()[0],
            level,
            f" {label}",
            verticalalignment="bottom",
            color=CLASS_COLORS[label],
        )


def plot_xray_flux(df: pd.DataFrame):
    """
    Log-scale GOES long-band flux with flare class thresholds.
    """
    if df.empty:
        raise ValueError("No X-ray flux data available to plot.")

    fig, ax = plt.subplots(1, 1, figsize=(14, 6))
    ax.plot(df["time_tag"], df["flux"], label="Long (0.1-0.8 nm)")
    ax.set_yscale("log")
    ax.set_ylabel("W/m^2")
    ax.set_title("GOES X-Ray Flux (1-minute, primary)")

    _add_xray_flare_class_grid(ax)

    ax.legend()
    ax.grid(True, which="both", ls="--", alpha=0.3)
    ax.xaxis.set_major_formatter(mdates.DateFormatter("%b-%d %H:%M"))
    fig.autofmt_xdate()

    plt.tight_layout()
    plt.show()
