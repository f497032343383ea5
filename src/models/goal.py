"""Модель цели по весу."""
from sqlalchemy import Column, Date, Float
from src.models.base import BaseModel


class Goal(BaseModel):
    """Цель: дойти до target_weight к target_date."""

    __tablename__ = "goals"

    target_weight = Column(Float, nullable=False)
    # Вес на момент создания цели. Если не задан — берётся текущий вес
    start_weight = Column(Float)
    start_date = Column(Date, nullable=False)
    target_date = Column(Date, nullable=False)

    def __repr__(self):
        return f"<Goal {self.target_weight} by {self.target_date}>"
