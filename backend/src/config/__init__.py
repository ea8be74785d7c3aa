"""
Configuration package for the RecLeague backend.
"""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
