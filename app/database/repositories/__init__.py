"""
Data repositories package.

This package provides the read-side repository over the
snapshot store.
"""

from .rates_repo import RatesRepository, CURRENT_KEY

__all__ = [
    'RatesRepository',
    'CURRENT_KEY',
]
