"""
Local package for the LocalCast host.

This package provides the merged host configuration through the config module
and the lifecycle hooks that start and stop the backend through BackendHost.
"""

from .config import effective_settings
from .host import BackendHost

__all__ = ["effective_settings", "BackendHost"]
