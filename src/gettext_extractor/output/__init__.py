"""Catalog serialization."""
