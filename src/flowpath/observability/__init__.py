"""Observability module for flowpath."""

from flowpath.observability.logging import ContextLogger, setup_logging

__all__ = ["ContextLogger", "setup_logging"]
