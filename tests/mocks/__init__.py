"""Test doubles for search collaborators."""
