"""HTTP layer for the VOD catalog.

- Validates and coerces query input, reads the DB through the repository
- Triggers ingestion runs (manual and scheduled)
- Forbidden: talking to the upstream API directly
"""
