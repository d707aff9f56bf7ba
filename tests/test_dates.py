from __future__ import annotations

import pytest

from ofx2csv.dates import format_ofx_date, strip_timezone
from ofx2csv.errors import DateParseFailure


@pytest.mark.parametrize(
    "raw,style,expected",
    [
        ("20230101", "iso", "2023-01-01"),
        ("20230615120000", "iso", "2023-06-15 12:00:00"),
        ("20230615235959.123", "iso", "2023-06-15 23:59:59"),
        ("20230101", "dmy", "01/01/2023"),
        ("20230615083000", "dmy", "15/06/2023 08:30:00"),
    ],
)
def test_format_ofx_date(raw, style, expected):
    assert format_ofx_date(raw, style) == expected


@pytest.mark.parametrize("raw", ["abcdefgh", "", "2023010", "202301011", "20231340", "20230101250000", "2023-01-01"])
def test_format_ofx_date_rejects(raw):
    with pytest.raises(DateParseFailure) as exc:
        format_ofx_date(raw)
    assert exc.value.value == raw


def test_strip_timezone():
    assert strip_timezone("20230615120000[-3:GMT]") == "20230615120000"
    assert strip_timezone("20230615[0:UTC]") == "20230615"
    assert strip_timezone("20230615") == "20230615"
