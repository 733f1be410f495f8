from database.models import Currency
from utils.formatters import order_currencies


def test_order_currencies_pins_eur_usd_gbp():
    currencies = [
        Currency("JPY", 121.75),
        Currency("GBP", 0.8508),
        Currency("CHF", 1.0854),
        Currency("USD", 1.1193),
        Currency("EUR", 1.0),
    ]
    assert [c.name for c in order_currencies(currencies)] == ["EUR", "USD", "GBP", "JPY", "CHF"]


def test_order_currencies_without_pinned_keeps_order():
    currencies = [Currency("JPY", 121.75), Currency("CHF", 1.0854)]
    assert order_currencies(currencies) == currencies
