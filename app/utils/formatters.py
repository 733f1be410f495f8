"""
Display helpers for snapshots.

- order_currencies: EUR first, then USD, then GBP, everything else in stored order.
"""

from typing import Iterable, List

# Currencies pinned to the top of any listing, in this order
PINNED_CURRENCIES = ("EUR", "USD", "GBP")


def order_currencies(currencies: Iterable) -> List:
    """
    Order currencies for display.

    The pinned currencies come first in PINNED_CURRENCIES order; the rest
    keep their stored (feed) order since sorted() is stable.
    """
    def rank(currency) -> int:
        try:
            return PINNED_CURRENCIES.index(currency.name)
        except ValueError:
            return len(PINNED_CURRENCIES)

    return sorted(currencies, key=rank)
