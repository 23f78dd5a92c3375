import pytest

from shopledger.services import analytics


def rec(
    main_with=0.0,
    main_without=0.0,
    order_with=0.0,
    order_without=0.0,
    main_stock=0.0,
    order_stock=0.0,
):
    return {
        "revenue_main_with_margin": main_with,
        "revenue_main_without_margin": main_without,
        "revenue_order_with_margin": order_with,
        "revenue_order_without_margin": order_without,
        "main_stock_value": main_stock,
        "order_stock_value": order_stock,
    }


def test_single_record_example():
    records = [rec(main_with=10000, main_without=8000, main_stock=5000)]

    assert analytics.gmroi(records) == pytest.approx(0.4)
    assert analytics.overall_margin(records) == pytest.approx(20.0)
    assert analytics.inventory_turnover(records) == pytest.approx(8000 / 5000 * 365)


def test_gmroi_zero_cases():
    assert analytics.gmroi([]) == 0
    assert analytics.gmroi([rec(main_with=100, main_without=50)]) == 0


def test_gmroi_skips_empty_stock_days():
    records = [
        rec(main_with=300, main_without=200, main_stock=1000),
        rec(main_with=500, main_without=100),
        rec(order_with=200, order_without=100, order_stock=3000),
    ]
    # Средний склад по двум дням с остатком: (1000 + 3000) / 2
    assert analytics.gmroi(records) == pytest.approx((500 - 300) / 2000)


def test_inventory_turnover_zero_cases():
    assert analytics.inventory_turnover([]) == 0
    assert analytics.inventory_turnover([rec(main_without=100)]) == 0


def test_overall_margin_zero_revenue():
    assert analytics.overall_margin([]) == 0
    assert analytics.overall_margin([rec(main_stock=100)]) == 0


def test_overall_margin_combines_main_and_order():
    records = [
        rec(main_with=100, main_without=80),
        rec(order_with=300, order_without=200),
    ]
    assert analytics.overall_margin(records) == pytest.approx(120 / 400 * 100)


def test_growth_needs_more_than_window():
    records = [rec(main_with=100) for _ in range(7)]
    assert analytics.daily_revenue_growth(records) == 0
    assert analytics.daily_revenue_growth([]) == 0


def test_growth_against_window_average():
    records = [rec(main_with=100) for _ in range(7)] + [rec(main_with=80, order_with=40)]
    assert analytics.daily_revenue_growth(records) == pytest.approx(20.0)


def test_growth_averages_samples():
    records = [rec(main_with=100), rec(main_with=200), rec(main_with=100)]
    # window=1: +100% и -50%
    assert analytics.daily_revenue_growth(records, window=1) == pytest.approx(25.0)


def test_growth_skips_zero_baseline():
    records = [rec(), rec(main_with=100), rec(main_with=150)]
    assert analytics.daily_revenue_growth(records, window=1) == pytest.approx(50.0)
    assert analytics.daily_revenue_growth([rec(), rec(main_with=10)], window=1) == 0


def test_field_stats():
    assert analytics.field_stats([3, 1, 2]) == {"min": 1, "max": 3, "avg": 2}
    assert analytics.field_stats([]) is None


def test_stats_with_baseline_trend():
    records = [
        rec(main_with=100, main_without=50, order_stock=10),
        rec(main_with=200, main_without=150, order_stock=30),
        rec(main_with=50, main_without=10, order_stock=20),
    ]

    stats = analytics.stats_with_baseline(records)

    main_revenue = stats["main"]["revenue_with_margin"]
    assert main_revenue["full"]["avg"] == pytest.approx(350 / 3)
    assert main_revenue["baseline"]["avg"] == pytest.approx(150)
    assert main_revenue["trend"] == "declining"

    main_margin = stats["main"]["margin"]
    assert main_margin["full"] == {"min": 40, "max": 50, "avg": pytest.approx(140 / 3)}
    assert main_margin["trend"] == "declining"

    order_stock = stats["order"]["stock"]
    assert order_stock["baseline"]["max"] == 30
    assert order_stock["trend"] == "improving"

    equal = analytics.stats_with_baseline([rec(main_stock=5), rec(main_stock=5)])
    assert equal["main"]["stock"]["trend"] == "improving"


def test_stats_without_baseline():
    stats = analytics.stats_with_baseline([rec(main_with=10)])
    assert stats["main"]["revenue_with_margin"]["baseline"] is None
    assert stats["main"]["revenue_with_margin"]["trend"] is None

    empty = analytics.stats_with_baseline([])
    assert empty["order"]["margin"]["full"] is None


@pytest.mark.parametrize(
    "value, level",
    [(0.4, "critical"), (1.0, "warning"), (2.5, "good"), (3.0, "excellent")],
)
def test_gmroi_level(value, level):
    assert analytics.gmroi_level(value) == level


@pytest.mark.parametrize(
    "value, level",
    [
        (25, "volatile"),
        (-21, "volatile"),
        (5, "excellent"),
        (2, "good"),
        (0, "stable"),
        (-4, "warning"),
        (-10, "declining"),
    ],
)
def test_growth_level(value, level):
    assert analytics.growth_level(value) == level


def test_turnover_and_margin_levels():
    assert analytics.turnover_level(13) == "high"
    assert analytics.turnover_level(8) == "excellent"
    assert analytics.turnover_level(2.9) == "poor"
    assert analytics.margin_level(20) == "warning"
    assert analytics.margin_level(30) == "industry_average"
    assert analytics.margin_level(30.9) == "good"
    assert analytics.margin_level(50) == "excellent"


def test_advice_covers_every_kpi():
    records = [rec(main_with=10000, main_without=8000, main_stock=5000)]
    kpis = analytics.compute_kpis(records)

    result = {a["metric"]: a for a in analytics.advice(kpis)}

    assert result["gmroi"] == {"metric": "gmroi", "level": "critical", "value": 0.4}
    assert result["overall_margin"]["level"] == "warning"
    assert result["daily_revenue_growth"]["level"] == "stable"
    assert result["inventory_turnover"]["level"] == "high"
