"""Обработчики настроек и удаления данных."""
import logging

from telegram import Update
from telegram.ext import Application, CommandHandler, CallbackQueryHandler, ContextTypes
from src.keyboards.menus import get_reset_keyboard, get_settings_keyboard
from src.models import HeightUnit, WeightUnit
from src.services.record_store import StoreError, get_record_store
from src.services.user_service import resolve_user_id, get_settings

logger = logging.getLogger(__name__)

SETTINGS_TEXT = (
    "⚙️ <b>Настройки</b>\n\n"
    "Единицы используются только в подписях, записанные числа не пересчитываются."
)


async def settings_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Показать настройки."""
    user_id = resolve_user_id(update.effective_user)
    try:
        settings = get_settings(get_record_store(), user_id)
    except StoreError:
        await update.message.reply_text("⚠️ Не удалось загрузить настройки. Попробуй позже.")
        return

    await update.message.reply_text(
        SETTINGS_TEXT, reply_markup=get_settings_keyboard(settings), parse_mode="HTML"
    )


async def settings_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Переключение одной настройки."""
    query = update.callback_query
    await query.answer()

    user_id = resolve_user_id(update.effective_user)
    store = get_record_store()

    try:
        settings = get_settings(store, user_id)
        field = query.data.split(":", 1)[1]
        if field == "weight_unit":
            settings.weight_unit = WeightUnit.LB if settings.weight_unit == WeightUnit.KG else WeightUnit.KG
        elif field == "height_unit":
            settings.height_unit = HeightUnit.IN if settings.height_unit == HeightUnit.CM else HeightUnit.CM
        elif field == "notifications":
            settings.notifications = not settings.notifications
        else:
            return
        settings = store.save_user_settings(settings)
    except StoreError:
        await query.message.reply_text("⚠️ Не удалось сохранить настройки. Попробуй позже.")
        return

    await query.edit_message_text(
        SETTINGS_TEXT, reply_markup=get_settings_keyboard(settings), parse_mode="HTML"
    )


async def reset_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Запрос подтверждения на удаление всех данных."""
    await update.message.reply_text(
        "⚠️ Удалить все записи веса, цели и настройки? Это нельзя отменить.",
        reply_markup=get_reset_keyboard(),
    )


async def reset_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Подтверждение или отмена удаления."""
    query = update.callback_query
    await query.answer()

    if query.data != "reset:confirm":
        await query.edit_message_text("Удаление отменено.")
        return

    user_id = resolve_user_id(update.effective_user)
    try:
        deleted = get_record_store().clear_user_data(user_id)
    except StoreError:
        await query.edit_message_text("⚠️ Не удалось удалить данные. Попробуй позже.")
        return

    logger.info(f"Пользователь {user_id} удалил свои данные ({deleted} объектов)")
    await query.edit_message_text(f"🗑 Удалено объектов: {deleted}. Начать заново: /weight")


def register_handlers(application: Application) -> None:
    """Регистрация обработчиков."""
    application.add_handler(CommandHandler("settings", settings_command))
    application.add_handler(CallbackQueryHandler(settings_callback, pattern=r"^settings:"))
    application.add_handler(CommandHandler("reset", reset_command))
    application.add_handler(CallbackQueryHandler(reset_callback, pattern=r"^reset:"))
