"""
Services package.

This package provides the business logic services: the ECB feed
fetcher, store synchronization and scheduled refresh.
"""

from .fetchers import EcbFetcherService
from .sync_service import SyncService, initialize
from .scheduler import Scheduler

__all__ = [
    'EcbFetcherService',
    'SyncService',
    'initialize',
    'Scheduler',
]
