"""
NASA DONKI CME data source package.

Splits the download and plot helpers into dedicated modules that are
orchestrated by a SpaceWeatherAPI subclass, like the other sources.
"""
