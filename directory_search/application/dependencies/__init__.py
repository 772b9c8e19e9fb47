"""Dependency bundles for application services."""

from directory_search.application.dependencies.search_dependencies import SearchDependencies

__all__ = ["SearchDependencies"]
