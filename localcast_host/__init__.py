"""
LocalCast host component.

Finds the LocalCast backend executable, starts it when the host launches and
stops it when the host shuts down.
"""

__version__ = "0.1.0"
