"""
Configuration package.

This package provides application configuration management
via Settings class loaded from environment variables.
"""

from .settings import Settings

__all__ = ['Settings']
