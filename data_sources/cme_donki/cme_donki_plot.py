import matplotlib.pyplot as plt
import pandas as pd

from event_engine.enrichment import enrich
from event_engine.records import EnhancedCME

SCORE_LABELS = {
    1: "1 - ENLIL Earth arrival",
    2: "2 - ENLIL Earth impact",
    3: "3 - note mentions Earth",
    4: "4 - ENLIL run, not Earth",
}
OTHER_LABEL = "not Earth-relevant"
COLOR_MAP = {
    SCORE_LABELS[1]: "red",
    SCORE_LABELS[2]: "orange",
    SCORE_LABELS[3]: "gold",
    SCORE_LABELS[4]: "steelblue",
    OTHER_LABEL: "gray",
}


def cme_frame(records) -> pd.DataFrame:
    """One row per CME with its start time, score label and analysis speed."""
    enhanced = [rec if isinstance(rec, EnhancedCME) else enrich(rec) for rec in records]
    df = pd.DataFrame(
        {
            "activityID": [cme.activity_id for cme in enhanced],
            "startTime": [cme.start_time for cme in enhanced],
            "score": [SCORE_LABELS.get(cme.earth_impact_score, OTHER_LABEL) for cme in enhanced],
            "speed": [cme.display_analysis_speed for cme in enhanced],
        }
    )
    df["startTime"] = pd.to_datetime(df["startTime"], errors="coerce", utc=True)
    return df.dropna(subset=["startTime"])


def plot_cme(records):
    """
    Stacked daily CME counts colored by Earth impact score.
    """
    df = cme_frame(records)
    if df.empty:
        raise ValueError("No CME data available to plot.")

    counts = (
        df.groupby([df["startTime"].dt.date, "score"])
        .size()
        .unstack(fill_value=0)
        .reindex(columns=list(COLOR_MAP), fill_value=0)
    )
    counts.index = [d.strftime("%Y-%b-%d") for d in counts.index]

    counts.plot(
        kind="bar",
        stacked=True,
        figsize=(10, 4),
        color=[COLOR_MAP[key] for key in counts.columns],
    )
    plt.title("CME Count per Day by Earth Impact Score")
    plt.xlabel("Date")
    plt.ylabel("Number of CMEs")
    plt.legend(title="Earth impact score")
    plt.tight_layout()
    plt.show()
