"""Обработчики записи веса и истории."""
import logging
import uuid
from datetime import date

from telegram import Update
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
    ConversationHandler,
    MessageHandler,
    filters,
)
from src.keyboards.menus import get_record_keyboard
from src.models import WeightRecord
from src.services.record_store import StoreError, get_record_store
from src.services.user_service import resolve_user_id, get_settings, weight_unit_label
from src.services.validation import parse_exercise, parse_note, parse_weight_entry

logger = logging.getLogger(__name__)

# Состояния записи веса
WEIGHT, EXERCISE, NOTE = range(3)

HISTORY_LIMIT = 10

STORE_ERROR_TEXT = "⚠️ Не удалось сохранить данные. Попробуй позже."


def format_record(record: WeightRecord, unit: str) -> str:
    """Одна запись веса текстом."""
    text = f"📅 {record.date.strftime('%d.%m.%Y')} — <b>{record.weight:.1f} {unit}</b>"
    exercise = record.exercise
    if exercise:
        text += f"\n🏃 {exercise['type']}, {exercise['duration_minutes']} мин"
        if exercise["calories"] is not None:
            text += f", {exercise['calories']} ккал"
    if record.note:
        text += f"\n📝 {record.note}"
    return text


async def weight_start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Начало записи веса."""
    context.user_data.clear()
    await update.message.reply_text(
        "⚖️ <b>Новая запись</b>\n\n"
        "Шаг 1/3: Сколько ты весишь?\n"
        "Отправь числом (например: 70.5)\n"
        "Можно указать дату: 70.5 2025-03-10",
        parse_mode="HTML",
    )
    return WEIGHT


async def edit_start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Начало изменения записи по кнопке: те же шаги, что и у /weight."""
    query = update.callback_query
    await query.answer()

    record_id = query.data.split(":", 2)[2]
    user_id = resolve_user_id(update.effective_user)
    store = get_record_store()

    try:
        record = store.get_weight_record(user_id, record_id)
        unit = weight_unit_label(get_settings(store, user_id))
    except StoreError:
        await query.message.reply_text("⚠️ Не удалось загрузить запись. Попробуй позже.")
        return ConversationHandler.END

    if not record:
        await query.message.reply_text("⚠️ Запись не найдена.")
        return ConversationHandler.END

    context.user_data.clear()
    context.user_data["editing_id"] = record.id

    await query.message.reply_text(
        "✏️ <b>Изменение записи</b>\n\n"
        + format_record(record, unit)
        + "\n\nШаг 1/3: Новый вес (можно с датой: 70.5 2025-03-10)",
        parse_mode="HTML",
    )
    return WEIGHT


async def weight_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Обработка ввода веса и даты."""
    try:
        weight, record_date = parse_weight_entry(update.message.text, date.today())
    except ValueError as e:
        await update.message.reply_text(f"❌ {e}")
        return WEIGHT

    context.user_data["weight"] = weight
    context.user_data["date"] = record_date

    await update.message.reply_text(
        "✅ Вес сохранен\n\n"
        "Шаг 2/3: Была тренировка?\n"
        "Формат: тип минуты [калории], например: бег 30 250\n"
        "Отправь '-' если не было"
    )
    return EXERCISE


async def exercise_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Обработка тренировки."""
    try:
        context.user_data["exercise"] = parse_exercise(update.message.text)
    except ValueError as e:
        await update.message.reply_text(f"❌ {e}")
        return EXERCISE

    await update.message.reply_text(
        "Шаг 3/3: Добавить заметку?\nНапиши текст или '-' чтобы пропустить"
    )
    return NOTE


async def note_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Обработка заметки и сохранение записи (новой или изменённой)."""
    user_id = resolve_user_id(update.effective_user)
    exercise = context.user_data.get("exercise") or {}
    editing_id = context.user_data.get("editing_id")

    record = WeightRecord(
        id=editing_id or uuid.uuid4().hex,
        user_id=user_id,
        date=context.user_data["date"],
        weight=context.user_data["weight"],
        note=parse_note(update.message.text),
        exercise_type=exercise.get("type"),
        exercise_duration_minutes=exercise.get("duration_minutes"),
        exercise_calories=exercise.get("calories"),
    )

    store = get_record_store()
    try:
        if editing_id:
            record = store.update_weight_record(record)
        else:
            record = store.create_weight_record(record)
        unit = weight_unit_label(get_settings(store, user_id))
    except StoreError:
        logger.exception(f"Не удалось сохранить запись веса {user_id}")
        await update.message.reply_text(STORE_ERROR_TEXT)
        context.user_data.clear()
        return ConversationHandler.END

    context.user_data.clear()

    if record is None:
        await update.message.reply_text("⚠️ Запись не найдена, возможно, она уже удалена.")
        return ConversationHandler.END

    title = "✏️ <b>Запись изменена!</b>" if editing_id else "🎉 <b>Запись сохранена!</b>"
    await update.message.reply_text(
        title + "\n\n" + format_record(record, unit) + "\n\nПрогресс: /goals",
        reply_markup=get_record_keyboard(record.id),
        parse_mode="HTML",
    )
    return ConversationHandler.END


async def cancel(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Отмена записи."""
    await update.message.reply_text("❌ Запись отменена.")
    context.user_data.clear()
    return ConversationHandler.END


async def history_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Последние записи веса, каждая с кнопками изменения и удаления."""
    user_id = resolve_user_id(update.effective_user)
    store = get_record_store()

    try:
        records = store.list_weight_records(user_id)[:HISTORY_LIMIT]
        unit = weight_unit_label(get_settings(store, user_id))
    except StoreError:
        await update.message.reply_text("⚠️ Не удалось загрузить записи. Попробуй позже.")
        return

    if not records:
        await update.message.reply_text("Записей пока нет. Добавь первую: /weight")
        return

    await update.message.reply_text(f"📋 <b>Последние записи ({len(records)})</b>", parse_mode="HTML")
    for record in records:
        await update.message.reply_text(
            format_record(record, unit),
            reply_markup=get_record_keyboard(record.id),
            parse_mode="HTML",
        )


async def record_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Удаление записи по кнопке."""
    query = update.callback_query
    await query.answer()

    record_id = query.data.split(":", 2)[2]
    user_id = resolve_user_id(update.effective_user)

    try:
        deleted = get_record_store().delete_weight_record(user_id, record_id)
    except StoreError:
        await query.message.reply_text("⚠️ Не удалось удалить запись. Попробуй позже.")
        return

    if deleted:
        await query.edit_message_text("🗑 Запись удалена.")
    else:
        await query.edit_message_text("⚠️ Запись не найдена.")


def register_handlers(application: Application) -> None:
    """Регистрация обработчиков."""
    conv_handler = ConversationHandler(
        entry_points=[
            CommandHandler("weight", weight_start),
            CallbackQueryHandler(edit_start, pattern=r"^weight:edit:"),
        ],
        states={
            WEIGHT: [MessageHandler(filters.TEXT & ~filters.COMMAND, weight_handler)],
            EXERCISE: [MessageHandler(filters.TEXT & ~filters.COMMAND, exercise_handler)],
            NOTE: [MessageHandler(filters.TEXT & ~filters.COMMAND, note_handler)],
        },
        fallbacks=[CommandHandler("cancel", cancel)],
    )
    application.add_handler(conv_handler)
    application.add_handler(CommandHandler("history", history_command))
    application.add_handler(CallbackQueryHandler(record_callback, pattern=r"^weight:delete:"))
