"""Common utilities for claimflow."""

from .logger import configure_logging, parse_level

__all__ = ["configure_logging", "parse_level"]
