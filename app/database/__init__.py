"""
Database package.

This package provides the persistent snapshot store, the snapshot
record types and the read-side repository.
"""

from .models import Currency, Snapshot, BASE_CURRENCY
from .store import SnapshotStore
from .repositories import RatesRepository, CURRENT_KEY

__all__ = [
    'Currency',
    'Snapshot',
    'BASE_CURRENCY',
    'SnapshotStore',
    'RatesRepository',
    'CURRENT_KEY',
]
