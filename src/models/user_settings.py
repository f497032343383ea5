"""Модель настроек отображения пользователя."""
import enum
from sqlalchemy import Boolean, Column, DateTime, Enum, String
from sqlalchemy.sql import func
from src.database import Base


class WeightUnit(str, enum.Enum):
    """Единица веса."""
    KG = "kg"
    LB = "lb"


class HeightUnit(str, enum.Enum):
    """Единица роста."""
    CM = "cm"
    IN = "in"


class UserSettings(Base):
    """Настройки пользователя. Используются только для подписей."""

    __tablename__ = "user_settings"

    user_id = Column(String(64), primary_key=True)
    weight_unit = Column(Enum(WeightUnit), nullable=False, default=WeightUnit.KG)
    height_unit = Column(Enum(HeightUnit), nullable=False, default=HeightUnit.CM)
    notifications = Column(Boolean, nullable=False, default=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @classmethod
    def default(cls, user_id: str) -> "UserSettings":
        """Настройки по умолчанию: кг, см, уведомления включены."""
        return cls(
            user_id=user_id,
            weight_unit=WeightUnit.KG,
            height_unit=HeightUnit.CM,
            notifications=True,
        )
