"""Тесты генерации графиков."""
from datetime import date, timedelta
from types import SimpleNamespace

from src.services.chart_generator import generate_weekday_chart, generate_weight_chart
from src.services.progress_engine import calculate_weekday_distribution

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def make_records(count):
    start = date(2025, 3, 1)
    return [SimpleNamespace(date=start + timedelta(days=i), weight=70 - i * 0.2) for i in range(count)]


def test_weight_chart_is_png():
    """График веса — PNG."""
    chart = generate_weight_chart(make_records(10), title="Вес за месяц, кг")
    assert chart.startswith(PNG_SIGNATURE)


def test_weight_chart_single_point():
    """Одна точка тоже рисуется."""
    assert generate_weight_chart(make_records(1)).startswith(PNG_SIGNATURE)


def test_weight_chart_empty():
    """Нечего рисовать — None."""
    assert generate_weight_chart([]) is None


def test_weekday_chart():
    """Диаграмма по дням недели."""
    distribution = calculate_weekday_distribution(make_records(14))
    assert generate_weekday_chart(distribution).startswith(PNG_SIGNATURE)
    assert generate_weekday_chart(calculate_weekday_distribution([])) is None
