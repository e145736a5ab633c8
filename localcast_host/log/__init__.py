"""
Logging module for the host.
This module provides functionality to set up console and file logging.
"""

from .setup import setup_logging, level_from_name

__all__ = ["setup_logging", "level_from_name"]
