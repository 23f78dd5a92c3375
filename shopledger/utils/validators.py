import re
import logging

logger = logging.getLogger(__name__)

_TIMER_RE = re.compile(r"^([0-1]\d|2[0-3]):([0-5]\d)$")


def is_valid_shop_name(name: str) -> bool:
    """
    Проверяет, является ли название магазина допустимым.

    Args:
        name: Название магазина для проверки

    Returns:
        bool: True если название допустимо, иначе False
    """
    if not name or not name.strip():
        return False

    # Проверка длины (не более 100 символов)
    if len(name) > 100:
        return False

    dangerous_patterns = [
        r"--",
        r"\/\*",
        r"\*\/",
        r";",
        r"\bDROP\b",
        r"\bDELETE\b",
        r"\bUPDATE\b",
        r"\bINSERT\b",
        r"\bSELECT\b",
        r"\bUNION\b",
        r"\bALTER\b",
        r"\bTRUNCATE\b",
    ]

    for pattern in dangerous_patterns:
        if re.search(pattern, name, re.IGNORECASE):
            logger.warning(
                f"Suspicious shop name detected (possible SQL injection): {name}"
            )
            return False

    return True


def is_valid_email(email: str) -> bool:
    """
    Проверяет, является ли строка допустимым email-адресом.

    Args:
        email: Email-адрес для проверки

    Returns:
        bool: True если email допустим, иначе False
    """
    if not email:
        return False
    pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
    return bool(re.match(pattern, email))


def is_valid_timer(timer: str) -> bool:
    """Время напоминания в 24-часовом формате HH:mm"""
    return bool(timer) and bool(_TIMER_RE.match(timer))
