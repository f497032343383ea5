"""Хранилище на SQLAlchemy."""
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from src.database import get_db
from src.models import Goal, UserSettings, WeightRecord
from src.services.record_store import RecordStore, StoreError

logger = logging.getLogger(__name__)

# Эти поля выставляет только хранилище
_PROTECTED_FIELDS = {"id", "user_id", "created_at", "updated_at"}


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _copy_fields(source, target) -> None:
    """Перенести изменяемые колонки из source в target."""
    for column in target.__table__.columns:
        if column.name not in _PROTECTED_FIELDS:
            setattr(target, column.name, getattr(source, column.name))


class SqlRecordStore(RecordStore):
    """Записи, цели и настройки в реляционной БД."""

    def __init__(self, session_factory=None):
        # None — глобальная SessionLocal из src.database
        self.session_factory = session_factory

    @contextmanager
    def _session(self, operation: str):
        """Сессия с откатом и StoreError при ошибке БД."""
        with get_db(self.session_factory) as db:
            try:
                yield db
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Ошибка БД при {operation}: {e}")
                raise StoreError(f"Не удалось выполнить {operation}") from e

    # --- Записи веса ---

    def list_weight_records(self, user_id: str) -> List[WeightRecord]:
        with self._session("list_weight_records") as db:
            records = (
                db.query(WeightRecord)
                .filter(WeightRecord.user_id == user_id)
                .order_by(WeightRecord.date.desc(), WeightRecord.created_at.desc())
                .all()
            )
        logger.debug(f"Загружено {len(records)} записей веса для {user_id}")
        return records

    def get_weight_record(self, user_id: str, record_id: str) -> Optional[WeightRecord]:
        with self._session("get_weight_record") as db:
            return db.query(WeightRecord).filter_by(user_id=user_id, id=record_id).first()

    def create_weight_record(self, record: WeightRecord) -> WeightRecord:
        now = _now()
        record.created_at = now
        record.updated_at = now
        with self._session("create_weight_record") as db:
            db.add(record)
            db.commit()
            db.refresh(record)
        logger.info(f"Запись веса создана: {record.user_id}/{record.id}")
        return record

    def update_weight_record(self, record: WeightRecord) -> Optional[WeightRecord]:
        with self._session("update_weight_record") as db:
            existing = (
                db.query(WeightRecord).filter_by(user_id=record.user_id, id=record.id).first()
            )
            if not existing:
                logger.info(f"Запись веса не найдена: {record.user_id}/{record.id}")
                return None
            _copy_fields(record, existing)
            existing.updated_at = _now()
            db.commit()
            db.refresh(existing)
        logger.info(f"Запись веса обновлена: {record.user_id}/{record.id}")
        return existing

    def delete_weight_record(self, user_id: str, record_id: str) -> bool:
        with self._session("delete_weight_record") as db:
            deleted = (
                db.query(WeightRecord).filter_by(user_id=user_id, id=record_id).delete()
            )
            db.commit()
        logger.info(f"Удаление записи веса {user_id}/{record_id}: {bool(deleted)}")
        return bool(deleted)

    # --- Цели ---

    def list_goals(self, user_id: str) -> List[Goal]:
        with self._session("list_goals") as db:
            return (
                db.query(Goal)
                .filter(Goal.user_id == user_id)
                .order_by(Goal.created_at.desc())
                .all()
            )

    def get_goal(self, user_id: str, goal_id: str) -> Optional[Goal]:
        with self._session("get_goal") as db:
            return db.query(Goal).filter_by(user_id=user_id, id=goal_id).first()

    def create_goal(self, goal: Goal) -> Goal:
        now = _now()
        goal.created_at = now
        goal.updated_at = now
        with self._session("create_goal") as db:
            db.add(goal)
            db.commit()
            db.refresh(goal)
        logger.info(f"Цель создана: {goal.user_id}/{goal.id}")
        return goal

    def update_goal(self, goal: Goal) -> Optional[Goal]:
        with self._session("update_goal") as db:
            existing = db.query(Goal).filter_by(user_id=goal.user_id, id=goal.id).first()
            if not existing:
                logger.info(f"Цель не найдена: {goal.user_id}/{goal.id}")
                return None
            _copy_fields(goal, existing)
            existing.updated_at = _now()
            db.commit()
            db.refresh(existing)
        logger.info(f"Цель обновлена: {goal.user_id}/{goal.id}")
        return existing

    def delete_goal(self, user_id: str, goal_id: str) -> bool:
        with self._session("delete_goal") as db:
            deleted = db.query(Goal).filter_by(user_id=user_id, id=goal_id).delete()
            db.commit()
        logger.info(f"Удаление цели {user_id}/{goal_id}: {bool(deleted)}")
        return bool(deleted)

    # --- Настройки ---

    def get_user_settings(self, user_id: str) -> Optional[UserSettings]:
        with self._session("get_user_settings") as db:
            return db.query(UserSettings).filter_by(user_id=user_id).first()

    def save_user_settings(self, settings: UserSettings) -> UserSettings:
        with self._session("save_user_settings") as db:
            existing = db.query(UserSettings).filter_by(user_id=settings.user_id).first()
            if existing:
                existing.weight_unit = settings.weight_unit
                existing.height_unit = settings.height_unit
                existing.notifications = settings.notifications
            else:
                existing = UserSettings(
                    user_id=settings.user_id,
                    weight_unit=settings.weight_unit,
                    height_unit=settings.height_unit,
                    notifications=settings.notifications,
                )
                db.add(existing)
            existing.updated_at = _now()
            db.commit()
            db.refresh(existing)
        logger.info(f"Настройки сохранены: {settings.user_id}")
        return existing

    def clear_user_data(self, user_id: str) -> int:
        with self._session("clear_user_data") as db:
            deleted = db.query(WeightRecord).filter_by(user_id=user_id).delete()
            deleted += db.query(Goal).filter_by(user_id=user_id).delete()
            deleted += db.query(UserSettings).filter_by(user_id=user_id).delete()
            db.commit()
        logger.info(f"Удалено {deleted} объектов пользователя {user_id}")
        return deleted
