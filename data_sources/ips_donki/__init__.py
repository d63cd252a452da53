"""NASA DONKI interplanetary shock (IPS) data source package."""
