"""
NOAA SWPC GOES X-ray flux data source package.

Download/plot helpers for the realtime 1-minute primary GOES feed, plus
the A/B/C/M/X flare class thresholds.
"""
