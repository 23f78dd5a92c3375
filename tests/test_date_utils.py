import pytest
from datetime import date, datetime, timezone

from shopledger.core.exceptions import InvalidDate
from shopledger.utils.date_utils import format_display_date, localize, parse_display_date


def test_parse_display_date():
    assert parse_display_date("26.09.2025") == date(2025, 9, 26)
    assert parse_display_date("29.02.2024") == date(2024, 2, 29)


@pytest.mark.parametrize(
    "value", ["2025-09-26", "26/09/2025", "1.1.2025", "32.01.2025", "29.02.2023", "вчера", None]
)
def test_parse_rejects(value):
    with pytest.raises(InvalidDate):
        parse_display_date(value)


def test_format_display_date():
    assert format_display_date(date(2025, 1, 5)) == "05.01.2025"
    assert format_display_date(parse_display_date("31.12.2025")) == "31.12.2025"


def test_localize():
    naive = datetime(2025, 10, 1, 18, 30)
    assert localize(naive, "Europe/Moscow").utcoffset().total_seconds() == 3 * 3600
    assert localize(naive, "Europe/Moscow").hour == 18

    aware = datetime(2025, 10, 1, 22, 30, tzinfo=timezone.utc)
    moscow = localize(aware, "Europe/Moscow")
    assert (moscow.day, moscow.hour) == (2, 1)
