"""Infrastructure layer: adapters, persistence, analytics and providers."""
