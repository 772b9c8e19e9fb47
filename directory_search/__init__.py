"""
Employee Directory Search - tenant-scoped people search and ranking service.

This package provides the FastAPI backend for the directory search engine,
including multi-field fuzzy matching, weighted ranking, "did you mean"
suggestions, autocomplete and a tenant-qualified result cache.
"""

__version__ = "1.0.0"
