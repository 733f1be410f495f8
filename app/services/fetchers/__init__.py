"""
Remote rate feed package.

This package provides the ECB reference rate fetcher and the
eurofxref XML parser.
"""

from .ecb_service import EcbFetcherService, parse_feed

__all__ = [
    'EcbFetcherService',
    'parse_feed',
]
