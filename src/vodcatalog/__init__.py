"""VOD catalog service: a searchable video catalog refreshed from an upstream listing API."""

__version__ = "1.0.0"
