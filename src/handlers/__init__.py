"""Обработчики команд бота."""
from src.handlers.start import register_handlers as register_start_handlers
from src.handlers.record import register_handlers as register_record_handlers
from src.handlers.goals import register_handlers as register_goal_handlers
from src.handlers.stats import register_handlers as register_stats_handlers
from src.handlers.settings import register_handlers as register_settings_handlers

__all__ = [
    "register_start_handlers",
    "register_record_handlers",
    "register_goal_handlers",
    "register_stats_handlers",
    "register_settings_handlers",
]
