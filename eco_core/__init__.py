"""EcoMetrics Tracker - data synchronization and persistence core."""

__version__ = "0.1.0"
