"""Сервис для работы с пользователями."""
from telegram import User as TelegramUser
from src.models import UserSettings, WeightUnit
from src.services.record_store import RecordStore


def resolve_user_id(telegram_user: TelegramUser) -> str:
    """Непрозрачный ID пользователя для хранилища.

    Args:
        telegram_user: Объект пользователя из Telegram

    Returns:
        Строка с Telegram ID
    """
    return str(telegram_user.id)


def get_settings(store: RecordStore, user_id: str) -> UserSettings:
    """Сохранённые настройки или настройки по умолчанию (без записи в хранилище)."""
    settings = store.get_user_settings(user_id)
    return settings or UserSettings.default(user_id)


def weight_unit_label(settings: UserSettings) -> str:
    """Подпись единицы веса для сообщений."""
    return "фунт." if settings.weight_unit == WeightUnit.LB else "кг"
