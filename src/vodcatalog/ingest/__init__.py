"""Ingestion of the upstream listing into the catalog tables."""
