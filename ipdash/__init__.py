"""ipdash - IP intelligence and DNS-over-HTTPS latency dashboard."""

__version__ = "0.1.0"
