"""
Core utilities package.

This package provides essential utilities for the application:
logging configuration, the error taxonomy, and retry with backoff.
"""

from .logger import setup_logger
from .errors import (
    RatesError,
    DateParseError,
    DateNotFound,
    InvalidDateRange,
    EmptyDataset,
    FetcherError,
    DatabaseError,
)
from .retry import call_with_retries

__all__ = [
    'setup_logger',
    'RatesError',
    'DateParseError',
    'DateNotFound',
    'InvalidDateRange',
    'EmptyDataset',
    'FetcherError',
    'DatabaseError',
    'call_with_retries',
]
