"""
Utility functions package.

Exposes the date/key codec and display helpers.
"""

from .dates import date_as_key, key_as_date, parse_date, EARLIEST_DATE
from .formatters import order_currencies

__all__ = [
    'date_as_key',
    'key_as_date',
    'parse_date',
    'EARLIEST_DATE',
    'order_currencies',
]
