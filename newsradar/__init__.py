"""NewsRadar: keyword-driven news aggregation with a ranked in-memory cache."""

__version__ = "1.0.0"
