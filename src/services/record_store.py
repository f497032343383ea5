"""Хранилище записей веса, целей и настроек.

Одно хранилище на процесс, выбирается при старте по STORAGE_BACKEND:
sql — SQLAlchemy (по умолчанию), memory — словари в памяти процесса.
"""
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from src.config import config
from src.models import Goal, UserSettings, WeightRecord

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Хранилище недоступно или не смогло выполнить операцию."""


class RecordStore(ABC):
    """CRUD по user_id. Записи одного пользователя никогда не отдаются другому."""

    # --- Записи веса ---

    @abstractmethod
    def list_weight_records(self, user_id: str) -> List[WeightRecord]:
        """Все записи пользователя, новые (по дате) первыми."""
        pass

    @abstractmethod
    def get_weight_record(self, user_id: str, record_id: str) -> Optional[WeightRecord]:
        pass

    @abstractmethod
    def create_weight_record(self, record: WeightRecord) -> WeightRecord:
        pass

    @abstractmethod
    def update_weight_record(self, record: WeightRecord) -> Optional[WeightRecord]:
        """Обновляет запись с тем же id. None, если записи нет."""
        pass

    @abstractmethod
    def delete_weight_record(self, user_id: str, record_id: str) -> bool:
        pass

    # --- Цели ---

    @abstractmethod
    def list_goals(self, user_id: str) -> List[Goal]:
        """Все цели пользователя, созданные последними — первыми."""
        pass

    @abstractmethod
    def get_goal(self, user_id: str, goal_id: str) -> Optional[Goal]:
        pass

    @abstractmethod
    def create_goal(self, goal: Goal) -> Goal:
        pass

    @abstractmethod
    def update_goal(self, goal: Goal) -> Optional[Goal]:
        pass

    @abstractmethod
    def delete_goal(self, user_id: str, goal_id: str) -> bool:
        pass

    # --- Настройки ---

    @abstractmethod
    def get_user_settings(self, user_id: str) -> Optional[UserSettings]:
        """Сохранённые настройки или None, если пользователь их не менял."""
        pass

    @abstractmethod
    def save_user_settings(self, settings: UserSettings) -> UserSettings:
        pass

    @abstractmethod
    def clear_user_data(self, user_id: str) -> int:
        """Удаляет все данные пользователя. Возвращает число удалённых объектов."""
        pass


_store: Optional[RecordStore] = None


def create_record_store(backend: str) -> RecordStore:
    """Создать хранилище по имени бэкенда."""
    if backend == "memory":
        from src.services.memory_store import InMemoryRecordStore

        logger.warning("Используется хранилище в памяти: данные пропадут при перезапуске")
        return InMemoryRecordStore()
    if backend == "sql":
        from src.services.sql_store import SqlRecordStore

        return SqlRecordStore()
    raise ValueError(f"Неизвестный бэкенд хранилища: {backend}")


def get_record_store() -> RecordStore:
    """Глобальное хранилище процесса (создаётся при первом обращении)."""
    global _store
    if _store is None:
        _store = create_record_store(config.STORAGE_BACKEND)
        logger.info(f"Хранилище: {type(_store).__name__}")
    return _store


def set_record_store(store: Optional[RecordStore]) -> None:
    """Подменить глобальное хранилище (для тестов и bot.py)."""
    global _store
    _store = store
