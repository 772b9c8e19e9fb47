"""Core configuration and service wiring."""
