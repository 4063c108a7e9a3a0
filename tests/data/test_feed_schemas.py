# tests/data/test_feed_schemas.py
from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from nss_lab.data.schemas import NssRow, normalize_date

BASE = dict(type="pre", b1=0.06, b2=0.08, b3=0.1, b4=0.2, l1=1.9, l2=0.17)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("2025-08-07", "2025-08-07"),
        ("2025-08-07T00:00:00.000Z", "2025-08-07"),
        (" 2025-08-07 ", "2025-08-07"),
        (date(2025, 8, 7), "2025-08-07"),
        (datetime(2025, 8, 7, 23, 59), "2025-08-07"),
        (1754524800000, "2025-08-07"),  # epoch millis, 2025-08-07T00:00Z
        (1754524800000.0, "2025-08-07"),
    ],
)
def test_normalize_date(raw, expected):
    assert normalize_date(raw) == expected


def test_aware_datetime_normalized_to_utc():
    brt = timezone(timedelta(hours=-3))
    assert normalize_date(datetime(2025, 8, 7, 22, 0, tzinfo=brt)) == "2025-08-08"


@pytest.mark.parametrize("raw", [None, float("nan"), True, [2025, 8, 7]])
def test_normalize_date_rejects_unsupported(raw):
    with pytest.raises(ValueError):
        normalize_date(raw)


def test_row_normalizes_date_and_type():
    row = NssRow(date=datetime(2025, 8, 7), **{**BASE, "type": 1})
    assert row.date == "2025-08-07"
    assert row.type == "1"


def test_row_rejects_malformed_date():
    with pytest.raises(ValidationError):
        NssRow(date="07/08/2025", **BASE)
