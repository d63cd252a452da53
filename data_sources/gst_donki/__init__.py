"""NASA DONKI geomagnetic storm (GST) data source package."""
