"""
Модели данных учёта дневных показателей магазинов.
"""

from .shop import Shop
from .daily_record import DailyRecord

__all__ = [
    "Shop",
    "DailyRecord",
]
