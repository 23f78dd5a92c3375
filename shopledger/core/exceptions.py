"""
Ошибки учётного движка.

Каждая ошибка валидации или авторизации отдаётся вызывающему сразу,
без повторных попыток. Ошибки хранилища приходят как StorageError.
"""


class LedgerError(Exception):
    """Базовая ошибка для всех операций с магазинами и дневными записями"""

    code = "ledger_error"


class Unauthenticated(LedgerError):
    code = "unauthenticated"


class Forbidden(LedgerError):
    code = "forbidden"


class NotFound(LedgerError):
    code = "not_found"


class DuplicateRecord(LedgerError):
    code = "duplicate_record"


class MissingTarget(LedgerError):
    code = "missing_target"


class DuplicateEmail(LedgerError):
    code = "duplicate_email"


class StorageError(LedgerError):
    code = "storage_error"


class InvalidDate(LedgerError, ValueError):
    code = "invalid_date"


class InvalidAmount(LedgerError, ValueError):
    code = "invalid_amount"


class InvalidRange(LedgerError, ValueError):
    code = "invalid_range"


class InvalidShopData(LedgerError, ValueError):
    code = "invalid_shop_data"
