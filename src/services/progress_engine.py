"""Расчёт прогресса целей и статистики веса.

Все функции чистые: не ходят в БД, не пишут в лог и не читают часы,
"сегодня" всегда передаётся аргументом. Записи читаются по атрибутам
.date и .weight, поэтому подходят и модели SQLAlchemy, и простые объекты.

Битые записи (нечитаемая дата, вес не конечное положительное число)
пропускаются: одна плохая запись не должна ломать весь дашборд.
"""
import math
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, Optional

from dateutil.relativedelta import relativedelta


class TimeRange(str, Enum):
    """Период для графиков и статистики."""
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


_RANGE_DELTAS = {
    TimeRange.WEEK: timedelta(days=7),
    TimeRange.MONTH: relativedelta(months=1),
    TimeRange.YEAR: relativedelta(years=1),
}

# Индекс дня недели: 0 = воскресенье ... 6 = суббота
WEEKDAY_NAMES = ["Вс", "Пн", "Вт", "Ср", "Чт", "Пт", "Сб"]


def to_date(value) -> Optional[date]:
    """Привести значение к календарной дате (время суток отбрасывается).

    Понимает date, datetime и ISO-строки. Для всего остального — None.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        # fromisoformat понимает суффикс Z только с Python 3.11
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            return None
    return None


def weekday_index(day: date) -> int:
    """День недели в нумерации 0 = воскресенье ... 6 = суббота."""
    return (day.weekday() + 1) % 7


def _to_weight(value) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        weight = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(weight) or weight <= 0:
        return None
    return weight


def _timestamp(value) -> float:
    if isinstance(value, datetime):
        return value.timestamp()
    return float("-inf")


def _clean(records: Iterable) -> list[tuple[date, float, object]]:
    """Отфильтровать корректные записи: (дата, вес, запись)."""
    entries = []
    for record in records or []:
        day = to_date(getattr(record, "date", None))
        weight = _to_weight(getattr(record, "weight", None))
        if day is None or weight is None:
            continue
        entries.append((day, weight, record))
    return entries


def _latest(entries: list) -> Optional[tuple]:
    """Запись с максимальной датой.

    При равных датах побеждает более поздний created_at, а без меток
    времени — более поздняя позиция во входной последовательности.
    """
    if not entries:
        return None
    indexed = enumerate(entries)
    _, entry = max(
        indexed,
        key=lambda item: (
            item[1][0],
            _timestamp(getattr(item[1][2], "created_at", None)),
            item[0],
        ),
    )
    return entry


def _earliest(entries: list) -> Optional[tuple]:
    if not entries:
        return None
    return min(entries, key=lambda entry: entry[0])


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


# === Текущий вес и цели ===


def get_current_weight(records: Iterable) -> Optional[float]:
    """Вес из самой свежей записи или None, если данных нет."""
    latest = _latest(_clean(records))
    return latest[1] if latest else None


def calculate_progress(goal, current_weight: Optional[float]) -> float:
    """Прогресс цели в процентах, всегда в диапазоне [0, 100].

    Базой служит goal.start_weight, а если он не задан — текущий вес.
    Поэтому цель без стартового веса при первом расчёте показывает 0%.
    Цель, у которой старт совпадает с целевым весом, считается достигнутой.
    """
    if goal is None:
        return 0.0

    target = _to_weight(getattr(goal, "target_weight", None))
    current = _to_weight(current_weight)
    start = _to_weight(getattr(goal, "start_weight", None))
    if start is None:
        start = current

    if target is None or start is None:
        return 0.0
    if start == target:
        return 100.0
    if current is None:
        return 0.0

    if target < start:
        # Похудение
        if current <= target:
            return 100.0
        ratio = (start - current) / (start - target)
    else:
        # Набор массы
        if current >= target:
            return 100.0
        ratio = (current - start) / (target - start)

    return _clamp(ratio * 100, 0.0, 100.0)


def calculate_days_remaining(target_date, today) -> int:
    """Сколько целых дней осталось до target_date. Не меньше нуля."""
    target = to_date(target_date)
    current = to_date(today)
    if target is None or current is None:
        return 0
    return max((target - current).days, 0)


def calculate_daily_pace(
    current_weight: Optional[float], target_weight: Optional[float], days_remaining: int
) -> float:
    """Сколько нужно сбрасывать в день, чтобы успеть к сроку.

    0, если дней не осталось или цель уже достигнута.
    """
    if not days_remaining or days_remaining <= 0:
        return 0.0

    current = _to_weight(current_weight)
    target = _to_weight(target_weight)
    if current is None or target is None:
        return 0.0

    remaining = current - target
    return remaining / days_remaining if remaining > 0 else 0.0


def calculate_remaining_weight(
    current_weight: Optional[float], target_weight: Optional[float]
) -> float:
    """Сколько ещё осталось сбросить (не бывает отрицательным)."""
    current = _to_weight(current_weight)
    target = _to_weight(target_weight)
    if current is None or target is None:
        return 0.0
    return max(0.0, current - target)


def project_completion_date(records: Iterable, target_weight, today) -> Optional[date]:
    """Дата, когда линейный тренд пересечёт целевой вес.

    Тренд — средняя скорость изменения между первой и последней записью.
    Отсчёт ведётся от today. None, если записей меньше чем за два разных дня,
    тренда нет или он уводит от цели.
    """
    entries = _clean(records)
    target = _to_weight(target_weight)
    current_day = to_date(today)
    if not entries or target is None or current_day is None:
        return None

    first_day, first_weight, _ = _earliest(entries)
    last_day, last_weight, _ = _latest(entries)

    needed = target - last_weight
    if needed == 0:
        return current_day

    span = (last_day - first_day).days
    if span <= 0:
        return None

    rate = (last_weight - first_weight) / span
    if rate == 0 or needed / rate < 0:
        return None

    return current_day + timedelta(days=math.ceil(needed / rate))


def build_goal_summary(goal, records: Iterable, today) -> dict:
    """Всё, что нужно для карточки цели на дашборде."""
    records = list(records or [])
    current = get_current_weight(records)
    target = _to_weight(getattr(goal, "target_weight", None))
    start = _to_weight(getattr(goal, "start_weight", None))
    if start is None:
        start = current

    progress = calculate_progress(goal, current)
    days_remaining = calculate_days_remaining(getattr(goal, "target_date", None), today)

    if target is None or start is None:
        direction = None
    elif progress >= 100:
        direction = "reached"
    elif target < start:
        direction = "lose"
    else:
        direction = "gain"

    if direction == "reached":
        projected = to_date(today)
    else:
        projected = project_completion_date(records, target, today)

    return {
        "goal_id": getattr(goal, "id", None),
        "current_weight": current,
        "start_weight": start,
        "target_weight": target,
        "direction": direction,
        "progress": progress,
        "days_remaining": days_remaining,
        "daily_pace": calculate_daily_pace(current, target, days_remaining),
        "remaining_weight": calculate_remaining_weight(current, target),
        "projected_date": projected,
    }


def build_goal_summaries(goals: Iterable, records: Iterable, today) -> list[dict]:
    """Сводки по всем целям пользователя (их может быть сколько угодно)."""
    records = list(records or [])
    return [build_goal_summary(goal, records, today) for goal in goals or []]


# === Статистика ===


def calculate_descriptive_stats(records: Iterable) -> dict:
    """Среднее, минимум, максимум, изменение от пика и число дней с записями.

    weight_change считается как "пик минус текущий вес", а не
    "первая запись минус последняя".
    """
    entries = _clean(records)
    if not entries:
        return {
            "average": 0.0,
            "min": 0.0,
            "max": 0.0,
            "weight_change": 0.0,
            "days_logged": 0,
            "count": 0,
        }

    weights = [weight for _, weight, _ in entries]
    peak = max(weights)
    current = _latest(entries)[1]

    return {
        "average": sum(weights) / len(weights),
        "min": min(weights),
        "max": peak,
        "weight_change": peak - current if len(entries) > 1 else 0.0,
        "days_logged": len({day for day, _, _ in entries}),
        "count": len(entries),
    }


def calculate_first_to_last_change(records: Iterable) -> float:
    """Изменение "первая запись минус последняя".

    Альтернативное определение из старых версий статистики. На дашборде
    используется пик минус текущий вес, это — только для сравнения.
    """
    entries = _clean(records)
    if len(entries) < 2:
        return 0.0
    return _earliest(entries)[1] - _latest(entries)[1]


def calculate_weight_change_percentage(records: Iterable) -> float:
    """Изменение от пика в процентах от пикового веса."""
    stats = calculate_descriptive_stats(records)
    if stats["count"] < 2 or stats["max"] <= 0:
        return 0.0
    return stats["weight_change"] / stats["max"] * 100


def calculate_streak_days(records: Iterable, today) -> int:
    """Сколько дней подряд есть записи.

    Серия должна заканчиваться сегодня или вчера, иначе она прервана.
    """
    current = to_date(today)
    if current is None:
        return 0

    days = {day for day, _, _ in _clean(records)}
    if current in days:
        cursor = current
    elif current - timedelta(days=1) in days:
        cursor = current - timedelta(days=1)
    else:
        return 0

    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def calculate_weekday_distribution(records: Iterable) -> list[dict]:
    """Средний вес по дням недели (0 = воскресенье ... 6 = суббота).

    Для дня без записей average равен 0.
    """
    counts = [0] * 7
    totals = [0.0] * 7
    for day, weight, _ in _clean(records):
        index = weekday_index(day)
        counts[index] += 1
        totals[index] += weight

    return [
        {
            "weekday": index,
            "name": WEEKDAY_NAMES[index],
            "count": counts[index],
            "average": totals[index] / counts[index] if counts[index] else 0.0,
        }
        for index in range(7)
    ]


def filter_by_time_range(records: Iterable, time_range, now) -> list:
    """Записи не старше недели, месяца или года от now. Порядок сохраняется.

    Месяц и год — календарные: от 31 марта месяц назад будет 28 (29) февраля.
    """
    time_range = TimeRange(time_range)
    cutoff = to_date(now) - _RANGE_DELTAS[time_range]

    result = []
    for record in records or []:
        day = to_date(getattr(record, "date", None))
        if day is not None and day >= cutoff:
            result.append(record)
    return result


def build_stats_summary(records: Iterable, today) -> dict:
    """Статистика для экрана /stats одним словарём."""
    records = list(records or [])
    stats = calculate_descriptive_stats(records)
    stats.update(
        {
            "current_weight": get_current_weight(records),
            "weight_change_percentage": calculate_weight_change_percentage(records),
            "first_to_last_change": calculate_first_to_last_change(records),
            "streak_days": calculate_streak_days(records, today),
        }
    )
    return stats
