"""Модели базы данных."""
from src.models.base import BaseModel, TimestampMixin
from src.models.weight_record import WeightRecord
from src.models.goal import Goal
from src.models.user_settings import UserSettings, WeightUnit, HeightUnit

__all__ = [
    "BaseModel",
    "TimestampMixin",
    "WeightRecord",
    "Goal",
    "UserSettings",
    "WeightUnit",
    "HeightUnit",
]
