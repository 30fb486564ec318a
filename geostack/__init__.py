"""geostack — provision a pinned geospatial Python stack on HPC hosts."""

__version__ = "0.1.0"
