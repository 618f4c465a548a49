"""WPFleet: resource lifecycle helpers for fleet management scripts."""

__version__ = "0.1.0"
