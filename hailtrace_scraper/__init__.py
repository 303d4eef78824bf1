"""HailTrace storm-data scraper."""

__version__ = "1.0.0"
