"""Logging helpers."""

from parksys.observability.logging import configure_logging

__all__ = ["configure_logging"]
