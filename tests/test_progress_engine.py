"""Тесты расчёта прогресса и статистики."""
from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from src.models import Goal, WeightRecord
from src.services.progress_engine import (
    TimeRange,
    build_goal_summaries,
    build_goal_summary,
    build_stats_summary,
    calculate_daily_pace,
    calculate_days_remaining,
    calculate_descriptive_stats,
    calculate_first_to_last_change,
    calculate_progress,
    calculate_remaining_weight,
    calculate_streak_days,
    calculate_weekday_distribution,
    calculate_weight_change_percentage,
    filter_by_time_range,
    get_current_weight,
    project_completion_date,
    to_date,
    weekday_index,
)


def rec(day, weight, **kwargs):
    return SimpleNamespace(date=day, weight=weight, **kwargs)


@pytest.fixture
def march_records():
    """Три записи из сценария 10-12 марта."""
    return [
        rec(date(2025, 3, 10), 68.2),
        rec(date(2025, 3, 11), 67.8),
        rec(date(2025, 3, 12), 67.5),
    ]


# === Текущий вес ===


def test_current_weight_takes_latest_date(march_records):
    """Текущий вес — из записи с максимальной датой, порядок входа не важен."""
    shuffled = [march_records[2], march_records[0], march_records[1]]
    assert get_current_weight(shuffled) == 67.5


def test_current_weight_empty():
    """Без записей — None."""
    assert get_current_weight([]) is None


def test_current_weight_same_day_latest_created_at_wins():
    """При одинаковой дате побеждает более поздний created_at."""
    day = date(2025, 3, 10)
    later = datetime(2025, 3, 10, 20, 0, tzinfo=timezone.utc)
    earlier = datetime(2025, 3, 10, 8, 0, tzinfo=timezone.utc)
    records = [rec(day, 70.0, created_at=later), rec(day, 71.0, created_at=earlier)]
    assert get_current_weight(records) == 70.0


def test_current_weight_same_day_without_timestamps_last_wins():
    """Без меток времени побеждает последняя по порядку запись."""
    day = date(2025, 3, 10)
    assert get_current_weight([rec(day, 70.0), rec(day, 71.0)]) == 71.0


def test_current_weight_ignores_time_of_day():
    """Время суток не влияет на дату записи."""
    records = [
        rec(datetime(2025, 3, 11, 23, 59), 70.0),
        rec("2025-03-12T00:01:00", 69.0),
    ]
    assert get_current_weight(records) == 69.0


def test_bad_records_are_skipped():
    """NaN, отрицательный вес и нечитаемая дата пропускаются."""
    records = [
        rec(date(2025, 3, 13), float("nan")),
        rec(date(2025, 3, 14), -5),
        rec("вчера", 60.0),
        rec(date(2025, 3, 10), 70.0),
    ]
    assert get_current_weight(records) == 70.0
    assert calculate_descriptive_stats(records)["count"] == 1


def test_engine_accepts_orm_records():
    """Модели SQLAlchemy читаются так же, как простые объекты."""
    records = [
        WeightRecord(id="a", user_id="u", date=date(2025, 3, 10), weight=70.0),
        WeightRecord(id="b", user_id="u", date=date(2025, 3, 11), weight=69.5),
    ]
    assert get_current_weight(records) == 69.5


# === Прогресс ===


def test_progress_loss_goal_halfway():
    """Похудение: прошли половину пути."""
    goal = SimpleNamespace(target_weight=70.0, start_weight=80.0)
    assert calculate_progress(goal, 75.0) == pytest.approx(50.0)


def test_progress_loss_goal_overshoot_is_clamped():
    """Перелёт ниже цели — ровно 100%."""
    goal = SimpleNamespace(target_weight=70.0, start_weight=80.0)
    assert calculate_progress(goal, 65.0) == 100.0


def test_progress_loss_goal_moving_away_is_zero():
    """Набрали вместо сброса — 0%, а не отрицательное число."""
    goal = SimpleNamespace(target_weight=70.0, start_weight=80.0)
    assert calculate_progress(goal, 85.0) == 0.0


def test_progress_loss_monotonic():
    """Чем ближе к цели, тем больше прогресс."""
    goal = SimpleNamespace(target_weight=70.0, start_weight=80.0)
    weights = [82.0, 80.0, 78.5, 76.0, 73.2, 70.0, 68.0]
    values = [calculate_progress(goal, w) for w in weights]
    assert values == sorted(values)
    assert all(0.0 <= v <= 100.0 for v in values)


def test_progress_gain_goal():
    """Набор массы симметричен похудению."""
    goal = SimpleNamespace(target_weight=70.0, start_weight=60.0)
    assert calculate_progress(goal, 65.0) == pytest.approx(50.0)
    assert calculate_progress(goal, 71.0) == 100.0
    assert calculate_progress(goal, 55.0) == 0.0


@pytest.mark.parametrize("current", [50.0, 70.0, 90.0, None])
def test_progress_start_equals_target_is_complete(current):
    """Старт равен цели — цель достигнута при любом текущем весе."""
    goal = SimpleNamespace(target_weight=70.0, start_weight=70.0)
    assert calculate_progress(goal, current) == 100.0


def test_progress_without_start_weight_uses_current():
    """Без стартового веса база — текущий вес, поэтому 0%."""
    goal = SimpleNamespace(target_weight=65.0, start_weight=None)
    assert calculate_progress(goal, 67.5) == 0.0


def test_progress_without_any_data():
    """Нет ни стартового, ни текущего веса — 0%."""
    goal = SimpleNamespace(target_weight=65.0, start_weight=None)
    assert calculate_progress(goal, None) == 0.0
    assert calculate_progress(None, 70.0) == 0.0


# === Дни и темп ===


def test_days_remaining_exact_count():
    """Срок через 10 дней — 10."""
    today = date(2025, 3, 12)
    assert calculate_days_remaining(today + timedelta(days=10), today) == 10


@pytest.mark.parametrize("offset", [0, -1, -30])
def test_days_remaining_past_target_is_zero(offset):
    """Срок сегодня или в прошлом — 0."""
    today = date(2025, 3, 12)
    assert calculate_days_remaining(today + timedelta(days=offset), today) == 0


def test_days_remaining_ignores_time_of_day():
    """Время в today не сдвигает счёт дней."""
    now = datetime(2025, 3, 12, 18, 30)
    assert calculate_days_remaining(date(2025, 5, 31), now) == 80


@pytest.mark.parametrize("current,target", [(80.0, 70.0), (60.0, 70.0), (70.0, 70.0)])
def test_daily_pace_zero_when_no_days_left(current, target):
    """Дней не осталось — темп 0."""
    assert calculate_daily_pace(current, target, 0) == 0.0


def test_daily_pace_not_negative_past_target():
    """Уже ниже цели — темп 0, а не отрицательный."""
    assert calculate_daily_pace(64.0, 65.0, 10) == 0.0


def test_remaining_weight():
    """Осталось сбросить не бывает отрицательным."""
    assert calculate_remaining_weight(67.5, 65.0) == pytest.approx(2.5)
    assert calculate_remaining_weight(64.0, 65.0) == 0.0
    assert calculate_remaining_weight(None, 65.0) == 0.0


def test_goal_scenario(march_records):
    """Сценарий: цель 65 к 31 мая без стартового веса, сегодня 12 марта."""
    goal = SimpleNamespace(
        id="g1",
        target_weight=65.0,
        start_weight=None,
        start_date=date(2025, 3, 1),
        target_date=date(2025, 5, 31),
    )
    today = date(2025, 3, 12)

    current = get_current_weight(march_records)
    assert current == 67.5
    assert calculate_progress(goal, current) == 0.0
    days = calculate_days_remaining(goal.target_date, today)
    assert days == 80
    assert calculate_daily_pace(current, goal.target_weight, days) == pytest.approx(0.03125)

    summary = build_goal_summary(goal, march_records, today)
    assert summary["goal_id"] == "g1"
    assert summary["start_weight"] == 67.5
    assert summary["direction"] == "lose"
    assert summary["progress"] == 0.0
    assert summary["days_remaining"] == 80
    assert summary["daily_pace"] == pytest.approx(0.03125)
    assert summary["remaining_weight"] == pytest.approx(2.5)


def test_goal_summary_reached():
    """Достигнутая цель: прогноз — сегодня."""
    goal = SimpleNamespace(
        id="g2", target_weight=70.0, start_weight=75.0, target_date=date(2025, 6, 1)
    )
    records = [rec(date(2025, 3, 1), 75.0), rec(date(2025, 3, 10), 69.0)]
    summary = build_goal_summary(goal, records, date(2025, 3, 10))
    assert summary["direction"] == "reached"
    assert summary["progress"] == 100.0
    assert summary["projected_date"] == date(2025, 3, 10)
    assert summary["daily_pace"] == 0.0


def test_goal_summaries_for_many_goals(march_records):
    """Целей может быть несколько."""
    goals = [
        Goal(id="a", user_id="u", target_weight=65.0, start_weight=70.0,
             start_date=date(2025, 3, 1), target_date=date(2025, 5, 31)),
        Goal(id="b", user_id="u", target_weight=72.0, start_weight=67.0,
             start_date=date(2025, 3, 1), target_date=date(2025, 12, 31)),
    ]
    summaries = build_goal_summaries(goals, march_records, date(2025, 3, 12))
    assert [s["goal_id"] for s in summaries] == ["a", "b"]
    assert summaries[0]["progress"] == pytest.approx(50.0)
    assert summaries[1]["direction"] == "gain"
    assert summaries[1]["progress"] == pytest.approx(10.0)
    assert build_goal_summaries([], march_records, date(2025, 3, 12)) == []


# === Прогноз ===


def test_projection_follows_trend():
    """-0.1 в день, до цели 4 — через 40 дней."""
    records = [rec(date(2025, 3, 1), 70.0), rec(date(2025, 3, 11), 69.0)]
    assert project_completion_date(records, 65.0, date(2025, 3, 11)) == date(2025, 4, 20)


def test_projection_none_when_trend_moves_away():
    """Тренд уводит от цели — прогноза нет."""
    records = [rec(date(2025, 3, 1), 70.0), rec(date(2025, 3, 11), 69.0)]
    assert project_completion_date(records, 72.0, date(2025, 3, 11)) is None


def test_projection_none_without_span():
    """Все записи за один день — тренда нет."""
    records = [rec(date(2025, 3, 1), 70.0), rec(date(2025, 3, 1), 69.0)]
    assert project_completion_date(records, 65.0, date(2025, 3, 1)) is None
    assert project_completion_date([], 65.0, date(2025, 3, 1)) is None


# === Статистика ===


def test_descriptive_stats_scenario(march_records):
    """Среднее, минимум, максимум, изменение от пика и дни."""
    stats = calculate_descriptive_stats(march_records)
    assert stats["average"] == pytest.approx(67.8333, abs=1e-4)
    assert stats["min"] == 67.5
    assert stats["max"] == 68.2
    assert stats["weight_change"] == pytest.approx(0.7)
    assert stats["days_logged"] == 3


def test_descriptive_stats_empty():
    """Пустой ввод — нули, без исключений."""
    stats = calculate_descriptive_stats([])
    assert stats == {
        "average": 0.0,
        "min": 0.0,
        "max": 0.0,
        "weight_change": 0.0,
        "days_logged": 0,
        "count": 0,
    }


def test_descriptive_stats_single_record_has_no_change():
    """Одна запись — изменение 0."""
    stats = calculate_descriptive_stats([rec(date(2025, 3, 10), 70.0)])
    assert stats["weight_change"] == 0.0
    assert stats["average"] == 70.0


def test_days_logged_counts_distinct_dates():
    """Две записи за один день — один день."""
    records = [
        rec(datetime(2025, 3, 10, 8, 0), 70.0),
        rec(datetime(2025, 3, 10, 21, 0), 70.4),
        rec(date(2025, 3, 11), 70.1),
    ]
    assert calculate_descriptive_stats(records)["days_logged"] == 2


def test_peak_to_current_differs_from_first_to_last():
    """Два определения изменения веса расходятся, если пик не первый."""
    records = [
        rec(date(2025, 3, 1), 70.0),
        rec(date(2025, 3, 5), 73.0),
        rec(date(2025, 3, 10), 71.0),
    ]
    assert calculate_descriptive_stats(records)["weight_change"] == pytest.approx(2.0)
    assert calculate_first_to_last_change(records) == pytest.approx(-1.0)


def test_peak_to_current_matches_first_to_last_when_peak_is_first(march_records):
    """Если пик — первая запись, определения совпадают."""
    assert calculate_first_to_last_change(march_records) == pytest.approx(0.7)


def test_weight_change_percentage(march_records):
    """Процент от пикового веса."""
    assert calculate_weight_change_percentage(march_records) == pytest.approx(0.7 / 68.2 * 100)
    assert calculate_weight_change_percentage([]) == 0.0


def test_streak_days():
    """Серия подряд идущих дней, заканчивающаяся сегодня или вчера."""
    today = date(2025, 3, 12)
    records = [rec(today - timedelta(days=i), 70.0) for i in (0, 1, 2, 4)]
    assert calculate_streak_days(records, today) == 3

    from_yesterday = [rec(today - timedelta(days=i), 70.0) for i in (1, 2)]
    assert calculate_streak_days(from_yesterday, today) == 2

    broken = [rec(today - timedelta(days=3), 70.0)]
    assert calculate_streak_days(broken, today) == 0
    assert calculate_streak_days([], today) == 0


def test_stats_summary(march_records):
    """Сводка статистики содержит все показатели."""
    summary = build_stats_summary(march_records, date(2025, 3, 12))
    assert summary["current_weight"] == 67.5
    assert summary["streak_days"] == 3
    assert summary["first_to_last_change"] == pytest.approx(0.7)
    assert summary["days_logged"] == 3


# === Дни недели ===


def test_weekday_index_sunday_is_zero():
    """0 = воскресенье, 6 = суббота."""
    assert weekday_index(date(2025, 3, 9)) == 0  # воскресенье
    assert weekday_index(date(2025, 3, 10)) == 1  # понедельник
    assert weekday_index(date(2025, 3, 15)) == 6  # суббота


def test_weekday_distribution(march_records):
    """Пн, Вт, Ср заполнены, остальные дни — 0."""
    buckets = calculate_weekday_distribution(march_records)
    assert len(buckets) == 7
    assert [b["count"] for b in buckets] == [0, 1, 1, 1, 0, 0, 0]
    assert buckets[1]["average"] == 68.2
    assert buckets[0]["average"] == 0.0
    assert buckets[0]["name"] == "Вс"


def test_weekday_distribution_preserves_total():
    """Сумма count × average по дням равна сумме всех весов."""
    start = date(2025, 1, 1)
    records = [rec(start + timedelta(days=i), 60 + (i * 7 % 11) / 3) for i in range(45)]
    buckets = calculate_weekday_distribution(records)
    total = sum(b["count"] * b["average"] for b in buckets)
    assert total == pytest.approx(sum(r.weight for r in records))


def test_weekday_distribution_empty():
    """Без записей — семь пустых дней."""
    buckets = calculate_weekday_distribution([])
    assert all(b["count"] == 0 and b["average"] == 0.0 for b in buckets)


# === Фильтр по периоду ===


def test_filter_week_keeps_order():
    """Неделя: граница включительно, порядок не меняется."""
    now = date(2025, 3, 12)
    records = [
        rec(date(2025, 3, 12), 70.0),
        rec(date(2025, 3, 4), 71.0),
        rec(date(2025, 3, 5), 70.5),
        rec(date(2025, 3, 8), 70.2),
    ]
    result = filter_by_time_range(records, TimeRange.WEEK, now)
    assert result == [records[0], records[2], records[3]]


def test_filter_month_is_calendar_month():
    """Месяц назад от 31 марта — 28 февраля."""
    now = datetime(2025, 3, 31, 12, 0)
    records = [rec(date(2025, 2, 27), 70.0), rec(date(2025, 2, 28), 69.0)]
    assert filter_by_time_range(records, "month", now) == [records[1]]


def test_filter_year():
    """Год назад — та же дата прошлого года."""
    now = date(2025, 3, 12)
    records = [rec(date(2024, 3, 11), 70.0), rec(date(2024, 3, 12), 69.0)]
    assert filter_by_time_range(records, "year", now) == [records[1]]


def test_filter_skips_unreadable_dates():
    """Записи без даты не попадают в период."""
    records = [rec(None, 70.0), rec(date(2025, 3, 12), 69.0)]
    assert filter_by_time_range(records, "week", date(2025, 3, 12)) == [records[1]]


def test_filter_unknown_range():
    """Неизвестный период — ошибка вызывающего кода."""
    with pytest.raises(ValueError):
        filter_by_time_range([], "decade", date(2025, 3, 12))


def test_to_date():
    """Дата из разных представлений."""
    assert to_date("2025-03-10") == date(2025, 3, 10)
    assert to_date(datetime(2025, 3, 10, 23, 0)) == date(2025, 3, 10)
    assert to_date("10/03/2025") is None
    assert to_date(None) is None


def test_to_date_accepts_utc_suffix():
    """ISO-время с суффиксом Z (как в JSON) читается на любой версии Python."""
    assert to_date("2025-03-12T08:00:00Z") == date(2025, 3, 12)
    assert to_date("2025-03-12T08:00:00.000Z") == date(2025, 3, 12)
    records = [rec("2025-03-12T08:00:00Z", 69.0), rec(date(2025, 3, 11), 70.0)]
    assert get_current_weight(records) == 69.0
