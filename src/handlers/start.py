"""Обработчики команд /start и /help."""
from telegram import Update
from telegram.ext import Application, CommandHandler, CallbackQueryHandler, ContextTypes
from src.keyboards.menus import get_main_keyboard, get_stats_period_keyboard
from src.services.record_store import StoreError, get_record_store
from src.services.user_service import resolve_user_id, get_settings, weight_unit_label
from src.services.progress_engine import get_current_weight

HELP_TEXT = (
    "📖 <b>Команды бота:</b>\n\n"
    "⚖️ <b>Вес:</b>\n"
    "/weight - Записать вес\n"
    "/history - Последние записи\n\n"
    "🎯 <b>Цели:</b>\n"
    "/goal - Новая цель\n"
    "/goals - Мои цели и прогресс\n\n"
    "📊 <b>Статистика:</b>\n"
    "/stats - Статистика и графики\n\n"
    "⚙️ <b>Настройки:</b>\n"
    "/settings - Единицы и уведомления\n"
    "/reset - Удалить все мои данные\n\n"
    "❓ <b>Помощь:</b>\n"
    "/help - Эта справка\n"
    "/start - Начать сначала"
)


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Обработка команды /start."""
    user_id = resolve_user_id(update.effective_user)
    store = get_record_store()

    try:
        current = get_current_weight(store.list_weight_records(user_id))
        unit = weight_unit_label(get_settings(store, user_id))
    except StoreError:
        current, unit = None, "кг"

    name = update.effective_user.first_name or "друг"
    if current is None:
        text = (
            f"👋 Привет, {name}! Я помогу следить за весом.\n\n"
            "Записывай вес, ставь цели и смотри статистику.\n"
            "Начни с первой записи: /weight"
        )
    else:
        text = f"👋 С возвращением, {name}!\n\n⚖️ Текущий вес: {current:.1f} {unit}"

    await update.message.reply_text(text, reply_markup=get_main_keyboard())


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Обработка команды /help."""
    await update.message.reply_text(HELP_TEXT, parse_mode="HTML")


async def start_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Обработка inline-кнопок из /start."""
    query = update.callback_query
    await query.answer()

    if query.data == "start:record":
        await query.edit_message_text(
            "⚖️ Чтобы записать вес, отправь /weight\n"
            "Можно сразу с датой, например: 70.5 2025-03-10"
        )
    elif query.data == "start:goals":
        await query.edit_message_text("🎯 Твои цели: /goals\nНовая цель: /goal")
    elif query.data == "start:stats":
        await query.edit_message_text(
            "📊 Выбери период для статистики:",
            reply_markup=get_stats_period_keyboard(),
        )


def register_handlers(application: Application) -> None:
    """Регистрация обработчиков."""
    application.add_handler(CommandHandler("start", start_command))
    application.add_handler(CommandHandler("help", help_command))
    application.add_handler(CallbackQueryHandler(start_callback, pattern=r"^start:"))
