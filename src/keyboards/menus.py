"""Inline-клавиатуры бота."""
from telegram import InlineKeyboardButton, InlineKeyboardMarkup
from src.models import HeightUnit, UserSettings, WeightUnit


def get_main_keyboard() -> InlineKeyboardMarkup:
    """Кнопки под приветствием /start."""
    keyboard = [
        [InlineKeyboardButton("⚖️ Записать вес", callback_data="start:record")],
        [InlineKeyboardButton("🎯 Мои цели", callback_data="start:goals")],
        [InlineKeyboardButton("📊 Статистика", callback_data="start:stats")],
    ]
    return InlineKeyboardMarkup(keyboard)


def get_record_keyboard(record_id: str) -> InlineKeyboardMarkup:
    """Кнопки изменения и удаления под записью веса.

    Args:
        record_id: ID записи
    """
    keyboard = [
        [
            InlineKeyboardButton("✏️ Изменить", callback_data=f"weight:edit:{record_id}"),
            InlineKeyboardButton("❌ Удалить", callback_data=f"weight:delete:{record_id}"),
        ]
    ]
    return InlineKeyboardMarkup(keyboard)


def get_goal_keyboard(goal_id: str) -> InlineKeyboardMarkup:
    """Кнопки изменения и удаления под карточкой цели."""
    keyboard = [
        [
            InlineKeyboardButton("✏️ Изменить", callback_data=f"goal:edit:{goal_id}"),
            InlineKeyboardButton("🗑 Удалить цель", callback_data=f"goal:delete:{goal_id}"),
        ]
    ]
    return InlineKeyboardMarkup(keyboard)


def get_stats_period_keyboard() -> InlineKeyboardMarkup:
    """Выбор периода статистики."""
    keyboard = [
        [InlineKeyboardButton("📅 За неделю", callback_data="stats:week")],
        [InlineKeyboardButton("📊 За месяц", callback_data="stats:month")],
        [InlineKeyboardButton("📈 За год", callback_data="stats:year")],
    ]
    return InlineKeyboardMarkup(keyboard)


def get_settings_keyboard(settings: UserSettings) -> InlineKeyboardMarkup:
    """Переключатели настроек с текущими значениями на кнопках."""
    weight = "кг" if settings.weight_unit == WeightUnit.KG else "фунты"
    height = "см" if settings.height_unit == HeightUnit.CM else "дюймы"
    notifications = "вкл" if settings.notifications else "выкл"

    keyboard = [
        [InlineKeyboardButton(f"⚖️ Вес: {weight}", callback_data="settings:weight_unit")],
        [InlineKeyboardButton(f"📏 Рост: {height}", callback_data="settings:height_unit")],
        [InlineKeyboardButton(f"🔔 Уведомления: {notifications}", callback_data="settings:notifications")],
    ]
    return InlineKeyboardMarkup(keyboard)


def get_reset_keyboard() -> InlineKeyboardMarkup:
    """Подтверждение удаления всех данных."""
    keyboard = [
        [
            InlineKeyboardButton("✅ Удалить всё", callback_data="reset:confirm"),
            InlineKeyboardButton("◀️ Отмена", callback_data="reset:cancel"),
        ]
    ]
    return InlineKeyboardMarkup(keyboard)
