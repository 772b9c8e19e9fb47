"""Persistence layer for the PostgreSQL employee store."""
