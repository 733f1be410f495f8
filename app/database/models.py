"""
Snapshot record types and their stored encoding.

A Snapshot is one calendar day of ECB reference rates. Stored values are
UTF-8 JSON documents of the form:

    {"value": "2020-01-02", "currencies": [{"name": "USD", "rate": 1.1193}, ...]}
"""

import json
from dataclasses import dataclass, field, replace
from datetime import date
from typing import List

from core.errors import DatabaseError
from utils.dates import parse_date

BASE_CURRENCY = "EUR"


@dataclass(frozen=True)
class Currency:
    name: str
    rate: float


@dataclass(frozen=True)
class Snapshot:
    value: str
    currencies: List[Currency] = field(default_factory=list)

    @property
    def date(self) -> date:
        return parse_date(self.value)

    def with_base(self) -> "Snapshot":
        """Return a copy carrying exactly one EUR entry at rate 1.0, appended last."""
        currencies = [c for c in self.currencies if c.name != BASE_CURRENCY]
        currencies.append(Currency(name=BASE_CURRENCY, rate=1.0))
        return replace(self, currencies=currencies)

    def to_bytes(self) -> bytes:
        data = {
            "value": self.value,
            "currencies": [{"name": c.name, "rate": c.rate} for c in self.currencies],
        }
        return json.dumps(data, ensure_ascii=False, separators=(",", ":")).encode("utf-8")

    @classmethod
    def from_bytes(cls, blob: bytes) -> "Snapshot":
        """
        Decode a stored snapshot.

        Raises:
            DatabaseError: If the blob is not a well-formed snapshot record
        """
        try:
            data = json.loads(bytes(blob).decode("utf-8"))
            return cls(
                value=str(data["value"]),
                currencies=[
                    Currency(name=str(c["name"]), rate=float(c["rate"]))
                    for c in data["currencies"]
                ],
            )
        except (TypeError, ValueError, KeyError) as e:
            raise DatabaseError(f"corrupted snapshot record: {e}") from e
