"""Power meter dashboard, time-of-use and tariff charge API."""

__version__ = "0.1.0"
