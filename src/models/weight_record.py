"""Модель записи веса пользователя."""
from sqlalchemy import Column, Date, Float, Integer, String, Text
from src.models.base import BaseModel


class WeightRecord(BaseModel):
    """Одно измерение веса с необязательной тренировкой."""

    __tablename__ = "weight_records"

    date = Column(Date, nullable=False, index=True)
    weight = Column(Float, nullable=False)  # единица — из настроек пользователя
    note = Column(Text)

    # Тренировка (опционально)
    exercise_type = Column(String(100))
    exercise_duration_minutes = Column(Integer)
    exercise_calories = Column(Integer)

    @property
    def exercise(self) -> dict | None:
        """Тренировка одним словарём или None, если её нет."""
        if not self.exercise_type:
            return None
        return {
            "type": self.exercise_type,
            "duration_minutes": self.exercise_duration_minutes or 0,
            "calories": self.exercise_calories,
        }

    def __repr__(self):
        return f"<WeightRecord {self.date} {self.weight}>"
