"""Базовые классы для моделей SQLAlchemy."""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from src.database import Base


class TimestampMixin:
    """Миксин для автоматического создания временных меток."""

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class BaseModel(Base, TimestampMixin):
    """Базовая модель для всех таблиц.

    ID генерирует вызывающая сторона (uuid4().hex), владелец записи —
    непрозрачная строка user_id.
    """

    __abstract__ = True

    id = Column(String(64), primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)
