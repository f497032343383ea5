"""Сборка данных для экранов бота: хранилище → расчёт → словарь."""
from datetime import date

from src.services import progress_engine
from src.services.progress_engine import TimeRange
from src.services.record_store import RecordStore
from src.services.user_service import get_settings


def get_goals_overview(store: RecordStore, user_id: str, today: date) -> dict:
    """Текущий вес и сводки по всем целям пользователя."""
    records = store.list_weight_records(user_id)
    goals = store.list_goals(user_id)

    return {
        "settings": get_settings(store, user_id),
        "current_weight": progress_engine.get_current_weight(records),
        "goals": goals,
        "summaries": progress_engine.build_goal_summaries(goals, records, today),
    }


def get_stats_overview(
    store: RecordStore, user_id: str, time_range: str, today: date
) -> dict:
    """Статистика и распределение по дням недели за выбранный период."""
    time_range = TimeRange(time_range)
    records = store.list_weight_records(user_id)
    filtered = progress_engine.filter_by_time_range(records, time_range, today)
    # Хранилище отдаёт новые записи первыми, график строим по возрастанию
    chronological = sorted(filtered, key=lambda r: progress_engine.to_date(r.date) or date.min)

    stats = progress_engine.build_stats_summary(filtered, today)
    # Серия не ограничивается выбранным периодом
    stats["streak_days"] = progress_engine.calculate_streak_days(records, today)

    return {
        "settings": get_settings(store, user_id),
        "time_range": time_range,
        "records": chronological,
        "stats": stats,
        "weekdays": progress_engine.calculate_weekday_distribution(filtered),
        "total_records": len(records),
    }
