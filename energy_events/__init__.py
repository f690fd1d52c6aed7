"""DC energy events aggregator."""

__version__ = "0.1.0"
