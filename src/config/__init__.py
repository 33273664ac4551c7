"""
Configuration module.

Provides the type-safe settings used across the application.
"""

from src.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
