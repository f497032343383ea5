"""Сервисы бизнес-логики."""
from src.services.record_store import RecordStore, StoreError, get_record_store
from src.services.user_service import resolve_user_id, get_settings
from src.services.dashboard_service import get_goals_overview, get_stats_overview

__all__ = [
    "RecordStore",
    "StoreError",
    "get_record_store",
    "resolve_user_id",
    "get_settings",
    "get_goals_overview",
    "get_stats_overview",
]
