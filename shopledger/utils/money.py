"""
Перевод денежных сумм между внешним десятичным видом и копейками.

Внутри хранилища и в расчётах суммы живут только целыми копейками,
преобразование выполняется на входе и выходе учётного движка.
"""

import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

from shopledger.core.exceptions import InvalidAmount

logger = logging.getLogger(__name__)

Amount = Union[int, float, str, Decimal]

CENTS_IN_UNIT = 100
# Верхняя граница колонки BigInteger
MAX_MINOR_UNITS = 2**63 - 1


def to_minor_units(value: Amount, field: str = "amount") -> int:
    """
    Преобразует десятичную сумму в копейки: round(value * 100).

    Args:
        value: Сумма (число, Decimal или строка; допускается запятая)
        field: Имя поля для сообщения об ошибке

    Returns:
        int: Сумма в копейках

    Raises:
        InvalidAmount: Если сумма не число, отрицательная или слишком большая
    """
    if value is None or isinstance(value, bool):
        raise InvalidAmount(f"Поле {field}: сумма не указана или имеет неверный тип")

    if isinstance(value, str):
        text = value.strip().replace(",", ".")
    else:
        text = str(value)

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise InvalidAmount(f"Поле {field}: неверный формат суммы: {value!r}")

    if not amount.is_finite():
        raise InvalidAmount(f"Поле {field}: неверный формат суммы: {value!r}")

    if amount < 0:
        raise InvalidAmount(f"Поле {field}: сумма не может быть отрицательной")

    cents = amount * CENTS_IN_UNIT
    if cents > MAX_MINOR_UNITS:
        raise InvalidAmount(f"Поле {field}: сумма слишком большая")

    return int(cents.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(cents: int) -> float:
    """Копейки -> десятичная сумма с двумя знаками"""
    return round(cents / CENTS_IN_UNIT, 2)
