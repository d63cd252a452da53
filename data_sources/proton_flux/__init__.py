"""NOAA SWPC GOES integral proton flux data source package."""
