"""
NASA DONKI solar flare data source package.

Download and plot helpers live in dedicated modules and are orchestrated
by a SpaceWeatherAPI subclass.
"""
