from datetime import date

import pytest

from core.errors import DatabaseError, DateParseError
from utils.dates import EARLIEST_DATE, date_as_key, key_as_date, parse_date


def test_date_as_key_earliest_feed_day():
    assert date_as_key("1999-01-04") == bytes([0, 0, 0, 0, 54, 144, 4, 128])


def test_date_as_key_is_eight_bytes_midnight_utc():
    key = date_as_key("2020-01-02")
    assert len(key) == 8
    assert int.from_bytes(key, "big") == 1577923200


@pytest.mark.parametrize("value", ["2020-01-02", "2020-1-2", " 2020-01-02 ", date(2020, 1, 2)])
def test_equivalent_forms_share_a_key(value):
    assert date_as_key(value) == date_as_key("2020-01-02")


def test_key_order_matches_date_order():
    days = ["1999-01-04", "1999-12-31", "2000-01-01", "2003-01-04", "2012-01-04", "2020-02-29", "2038-01-20"]
    keys = [date_as_key(d) for d in days]
    assert keys == sorted(keys)
    assert len(set(keys)) == len(keys)


@pytest.mark.parametrize("value", ["", "foo", "2020-02-30", "2020-13-01", "02/01/2020", None, 20200102])
def test_invalid_dates_raise_parse_error(value):
    with pytest.raises(DateParseError):
        date_as_key(value)


def test_dates_before_epoch_are_rejected():
    with pytest.raises(DateParseError):
        date_as_key("1969-12-31")
    assert int.from_bytes(date_as_key("1970-01-01"), "big") == 0


def test_key_as_date_inverts_date_as_key():
    assert key_as_date(date_as_key("2012-01-04")) == date(2012, 1, 4)
    assert key_as_date(date_as_key(EARLIEST_DATE)) == EARLIEST_DATE


@pytest.mark.parametrize("key", [b"", b"current", b"\x00" * 9])
def test_key_as_date_rejects_malformed_keys(key):
    with pytest.raises(DatabaseError):
        key_as_date(key)


def test_parse_date_error_is_a_client_error():
    with pytest.raises(DateParseError) as info:
        parse_date("yesterday")
    assert info.value.kind == "client"
    assert "yesterday" in str(info.value)
