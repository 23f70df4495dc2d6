"""Logging and correlation helpers."""

from .correlation import correlation_scope, get_correlation_id
from .logging_config import configure_logging

__all__ = ["configure_logging", "correlation_scope", "get_correlation_id"]
