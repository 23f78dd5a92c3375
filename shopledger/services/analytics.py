"""
Показатели эффективности магазинов по последовательности дневных записей.

Все функции чистые: принимают записи во внешнем (десятичном) виде,
упорядоченные по возрастанию даты, и каждый раз считают всё заново.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence

Record = Mapping[str, Any]

DAYS_IN_YEAR = 365
DEFAULT_GROWTH_WINDOW = 7


def revenue_with_margin(record: Record) -> float:
    return record["revenue_main_with_margin"] + record["revenue_order_with_margin"]


def revenue_without_margin(record: Record) -> float:
    return record["revenue_main_without_margin"] + record["revenue_order_without_margin"]


def stock_value(record: Record) -> float:
    return record["main_stock_value"] + record["order_stock_value"]


def _stocked(records: Sequence[Record]) -> List[Record]:
    # Дни с нулевым складом не участвуют в среднем остатке
    return [r for r in records if stock_value(r) > 0]


def _average_stock(records: Sequence[Record]) -> float:
    return sum(stock_value(r) for r in records) / len(records)


def gmroi(records: Sequence[Record]) -> float:
    """
    GMROI = (выручка с наценкой - выручка без наценки) / средний остаток склада.

    Считается по дням с ненулевым складом; если таких нет - 0.
    """
    stocked = _stocked(records)
    if not stocked:
        return 0.0

    avg_stock = _average_stock(stocked)
    gross_margin = sum(revenue_with_margin(r) for r in stocked) - sum(
        revenue_without_margin(r) for r in stocked
    )
    return gross_margin / avg_stock


def daily_revenue_growth(
    records: Sequence[Record], window: int = DEFAULT_GROWTH_WINDOW
) -> float:
    """
    Средний прирост дневной выручки (в %) относительно среднего
    за предыдущие window дней.

    Порядок записей - по возрастанию даты, его обеспечивает вызывающий.
    """
    if window < 1 or len(records) < window + 1:
        return 0.0

    growth_rates = []
    for i in range(window, len(records)):
        today = revenue_with_margin(records[i])
        baseline = sum(revenue_with_margin(r) for r in records[i - window : i]) / window
        if baseline > 0:
            growth_rates.append((today - baseline) / baseline * 100)

    if not growth_rates:
        return 0.0
    return sum(growth_rates) / len(growth_rates)


def inventory_turnover(records: Sequence[Record]) -> float:
    """Оборачиваемость запасов в год: (средняя дневная себестоимость продаж / средний склад) * 365"""
    stocked = _stocked(records)
    if not stocked:
        return 0.0

    avg_stock = _average_stock(stocked)
    avg_cost = sum(revenue_without_margin(r) for r in stocked) / len(stocked)
    return avg_cost / avg_stock * DAYS_IN_YEAR


def overall_margin(records: Sequence[Record]) -> float:
    total_with = sum(revenue_with_margin(r) for r in records)
    if not total_with:
        return 0.0
    total_without = sum(revenue_without_margin(r) for r in records)
    return (total_with - total_without) / total_with * 100


def field_stats(values: Sequence[float]) -> Optional[Dict[str, float]]:
    """min/max/avg; для пустой последовательности - None"""
    if not values:
        return None
    return {
        "min": min(values),
        "max": max(values),
        "avg": sum(values) / len(values),
    }


# Группа -> метрика -> функция значения записи
STAT_FIELDS = {
    "main": {
        "revenue_with_margin": lambda r: r["revenue_main_with_margin"],
        "revenue_without_margin": lambda r: r["revenue_main_without_margin"],
        "margin": lambda r: r["revenue_main_with_margin"] - r["revenue_main_without_margin"],
        "stock": lambda r: r["main_stock_value"],
    },
    "order": {
        "revenue_with_margin": lambda r: r["revenue_order_with_margin"],
        "revenue_without_margin": lambda r: r["revenue_order_without_margin"],
        "margin": lambda r: r["revenue_order_with_margin"] - r["revenue_order_without_margin"],
        "stock": lambda r: r["order_stock_value"],
    },
}


def stats_with_baseline(records: Sequence[Record]) -> Dict[str, Dict[str, Dict[str, Any]]]:
    """
    Статистика по каждому полю за весь период и за период без последнего дня.

    Тренд "improving", если среднее за весь период не меньше среднего
    без последнего дня, иначе "declining". Без базы сравнения тренд None.
    """
    baseline_records = list(records)[:-1]
    result = {}
    for group, metrics in STAT_FIELDS.items():
        result[group] = {}
        for name, getter in metrics.items():
            full = field_stats([getter(r) for r in records])
            baseline = field_stats([getter(r) for r in baseline_records])
            if full is None or baseline is None:
                trend = None
            elif full["avg"] >= baseline["avg"]:
                trend = "improving"
            else:
                trend = "declining"
            result[group][name] = {"full": full, "baseline": baseline, "trend": trend}
    return result


def gmroi_level(value: float) -> str:
    if value < 1.0:
        return "critical"
    if value < 2.0:
        return "warning"
    if value < 3.0:
        return "good"
    return "excellent"


def growth_level(value: float) -> str:
    if value > 20 or value < -20:
        return "volatile"
    if value >= 5:
        return "excellent"
    if value >= 2:
        return "good"
    if value >= -2:
        return "stable"
    if value >= -5:
        return "warning"
    return "declining"


def turnover_level(value: float) -> str:
    if value > 12:
        return "high"
    if value >= 8:
        return "excellent"
    if value >= 5:
        return "good"
    if value >= 3:
        return "average"
    return "poor"


def margin_level(value: float) -> str:
    if value < 25:
        return "warning"
    if value < 30.9:
        return "industry_average"
    if value < 50:
        return "good"
    return "excellent"


def compute_kpis(
    records: Sequence[Record], window: int = DEFAULT_GROWTH_WINDOW
) -> Dict[str, float]:
    return {
        "gmroi": gmroi(records),
        "daily_revenue_growth": daily_revenue_growth(records, window),
        "inventory_turnover": inventory_turnover(records),
        "overall_margin": overall_margin(records),
    }


def advice(kpis: Mapping[str, float]) -> List[Dict[str, Any]]:
    """Рекомендательные уровни по каждому показателю"""
    levels = {
        "gmroi": gmroi_level,
        "daily_revenue_growth": growth_level,
        "inventory_turnover": turnover_level,
        "overall_margin": margin_level,
    }
    return [
        {"metric": metric, "level": level_of(kpis[metric]), "value": round(kpis[metric], 2)}
        for metric, level_of in levels.items()
    ]
