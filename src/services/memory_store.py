"""Хранилище в памяти процесса. Для разработки и тестов."""
import logging
import threading
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from src.models import Goal, UserSettings, WeightRecord
from src.services.record_store import RecordStore, StoreError

logger = logging.getLogger(__name__)

_MIN_TIME = datetime.min.replace(tzinfo=timezone.utc)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _clone(obj):
    """Новый экземпляр с теми же колонками: вызывающий код не меняет хранилище напрямую."""
    if obj is None:
        return None
    values = {column.name: getattr(obj, column.name) for column in obj.__table__.columns}
    return type(obj)(**values)


def _ensure_new_id(storage: dict, object_id: str, operation: str) -> None:
    """id уникален среди всех пользователей, как первичный ключ в SQL."""
    if any(key[1] == object_id for key in storage):
        logger.error(f"Ошибка при {operation}: id {object_id} уже занят")
        raise StoreError(f"Не удалось выполнить {operation}")


class InMemoryRecordStore(RecordStore):
    """Словари с ключом (user_id, id), как ключи "weight:{user}:{id}" в KV-хранилище."""

    def __init__(self):
        self._lock = threading.Lock()
        self._weights: Dict[Tuple[str, str], WeightRecord] = {}
        self._goals: Dict[Tuple[str, str], Goal] = {}
        self._settings: Dict[str, UserSettings] = {}

    # --- Записи веса ---

    def list_weight_records(self, user_id: str) -> List[WeightRecord]:
        with self._lock:
            records = [_clone(r) for (owner, _), r in self._weights.items() if owner == user_id]
        records.sort(key=lambda r: (r.date, r.created_at or _MIN_TIME), reverse=True)
        logger.debug(f"Загружено {len(records)} записей веса для {user_id}")
        return records

    def get_weight_record(self, user_id: str, record_id: str) -> Optional[WeightRecord]:
        with self._lock:
            return _clone(self._weights.get((user_id, record_id)))

    def create_weight_record(self, record: WeightRecord) -> WeightRecord:
        now = _now()
        record.created_at = now
        record.updated_at = now
        with self._lock:
            _ensure_new_id(self._weights, record.id, "create_weight_record")
            self._weights[(record.user_id, record.id)] = _clone(record)
        logger.info(f"Запись веса создана: {record.user_id}/{record.id}")
        return record

    def update_weight_record(self, record: WeightRecord) -> Optional[WeightRecord]:
        key = (record.user_id, record.id)
        with self._lock:
            existing = self._weights.get(key)
            if existing is None:
                logger.info(f"Запись веса не найдена: {record.user_id}/{record.id}")
                return None
            record.created_at = existing.created_at
            record.updated_at = _now()
            self._weights[key] = _clone(record)
        logger.info(f"Запись веса обновлена: {record.user_id}/{record.id}")
        return record

    def delete_weight_record(self, user_id: str, record_id: str) -> bool:
        with self._lock:
            deleted = self._weights.pop((user_id, record_id), None) is not None
        logger.info(f"Удаление записи веса {user_id}/{record_id}: {deleted}")
        return deleted

    # --- Цели ---

    def list_goals(self, user_id: str) -> List[Goal]:
        with self._lock:
            goals = [_clone(g) for (owner, _), g in self._goals.items() if owner == user_id]
        goals.sort(key=lambda g: g.created_at or _MIN_TIME, reverse=True)
        return goals

    def get_goal(self, user_id: str, goal_id: str) -> Optional[Goal]:
        with self._lock:
            return _clone(self._goals.get((user_id, goal_id)))

    def create_goal(self, goal: Goal) -> Goal:
        now = _now()
        goal.created_at = now
        goal.updated_at = now
        with self._lock:
            _ensure_new_id(self._goals, goal.id, "create_goal")
            self._goals[(goal.user_id, goal.id)] = _clone(goal)
        logger.info(f"Цель создана: {goal.user_id}/{goal.id}")
        return goal

    def update_goal(self, goal: Goal) -> Optional[Goal]:
        key = (goal.user_id, goal.id)
        with self._lock:
            existing = self._goals.get(key)
            if existing is None:
                logger.info(f"Цель не найдена: {goal.user_id}/{goal.id}")
                return None
            goal.created_at = existing.created_at
            goal.updated_at = _now()
            self._goals[key] = _clone(goal)
        logger.info(f"Цель обновлена: {goal.user_id}/{goal.id}")
        return goal

    def delete_goal(self, user_id: str, goal_id: str) -> bool:
        with self._lock:
            deleted = self._goals.pop((user_id, goal_id), None) is not None
        logger.info(f"Удаление цели {user_id}/{goal_id}: {deleted}")
        return deleted

    # --- Настройки ---

    def get_user_settings(self, user_id: str) -> Optional[UserSettings]:
        with self._lock:
            return _clone(self._settings.get(user_id))

    def save_user_settings(self, settings: UserSettings) -> UserSettings:
        settings.updated_at = _now()
        with self._lock:
            self._settings[settings.user_id] = _clone(settings)
        logger.info(f"Настройки сохранены: {settings.user_id}")
        return settings

    def clear_user_data(self, user_id: str) -> int:
        with self._lock:
            weight_keys = [key for key in self._weights if key[0] == user_id]
            goal_keys = [key for key in self._goals if key[0] == user_id]
            for key in weight_keys:
                del self._weights[key]
            for key in goal_keys:
                del self._goals[key]
            settings = self._settings.pop(user_id, None)
        deleted = len(weight_keys) + len(goal_keys) + (1 if settings is not None else 0)
        logger.info(f"Удалено {deleted} объектов пользователя {user_id}")
        return deleted
