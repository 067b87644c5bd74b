"""Logging and metrics for huddle."""

from huddle.observability.logging import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
