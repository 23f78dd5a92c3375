import re
import datetime

import pytz

from shopledger.core.exceptions import InvalidDate

DISPLAY_DATE_FORMAT = "%d.%m.%Y"

_DISPLAY_DATE_RE = re.compile(r"^\d{2}\.\d{2}\.\d{4}$")


def parse_display_date(date_str: str) -> datetime.date:
    """
    Валидирует и преобразует строку даты DD.MM.YYYY в объект datetime.date.

    Это единственное место, где внешняя дата превращается во внутреннюю.

    Args:
        date_str: Строка с датой

    Returns:
        datetime.date: Объект даты

    Raises:
        InvalidDate: Если дата имеет неправильный формат или не существует
    """
    if not isinstance(date_str, str) or not _DISPLAY_DATE_RE.match(date_str.strip()):
        raise InvalidDate(
            f"Неверный формат даты: {date_str!r}. Ожидается формат DD.MM.YYYY"
        )

    try:
        return datetime.datetime.strptime(date_str.strip(), DISPLAY_DATE_FORMAT).date()
    except ValueError:
        raise InvalidDate(f"Несуществующая дата: {date_str}")


def format_display_date(date_obj: datetime.date) -> str:
    """Форматирует дату в вид DD.MM.YYYY"""
    return date_obj.strftime(DISPLAY_DATE_FORMAT)


def localize(moment: datetime.datetime, tz_name: str) -> datetime.datetime:
    """
    Переводит момент времени в указанный часовой пояс.

    Наивное время считается уже заданным в этом поясе.
    """
    tz = pytz.timezone(tz_name)
    if moment.tzinfo is None:
        return tz.localize(moment)
    return moment.astimezone(tz)
