"""Обработчики целей по весу."""
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
from src.keyboards.menus import get_goal_keyboard
from src.models import Goal
from src.services.dashboard_service import get_goals_overview
from src.services.record_store import StoreError, get_record_store
from src.services.user_service import resolve_user_id, weight_unit_label
from src.services.validation import (
    parse_date,
    parse_optional_weight,
    parse_weight,
    validate_goal_dates,
)

logger = logging.getLogger(__name__)

# Состояния создания цели
TARGET_WEIGHT, TARGET_DATE, START_WEIGHT = range(3)

DIRECTION_LABELS = {
    "lose": "📉 Похудение",
    "gain": "📈 Набор массы",
    "reached": "🏆 Цель достигнута",
}


def progress_bar(progress: float, width: int = 10) -> str:
    """Полоска прогресса из символов."""
    filled = int(round(progress / 100 * width))
    return "█" * filled + "░" * (width - filled)


def format_goal_summary(goal: Goal, summary: dict, unit: str) -> str:
    """Карточка цели для /goals."""
    lines = [
        f"🎯 <b>{summary['target_weight']:.1f} {unit}</b> к {goal.target_date.strftime('%d.%m.%Y')}",
    ]
    if summary["direction"]:
        lines.append(DIRECTION_LABELS[summary["direction"]])

    lines.append(f"{progress_bar(summary['progress'])} {summary['progress']:.1f}%")

    if summary["current_weight"] is not None:
        lines.append(f"⚖️ Сейчас: {summary['current_weight']:.1f} {unit}")
        lines.append(f"📉 Осталось: {summary['remaining_weight']:.1f} {unit}")
    if summary["start_weight"] is not None and goal.start_weight is None:
        lines.append("ℹ️ Стартовый вес не задан, за основу взят текущий")

    lines.append(f"⏳ Дней осталось: {summary['days_remaining']}")
    if summary["daily_pace"] > 0:
        lines.append(f"🔥 Нужно в день: {summary['daily_pace']:.2f} {unit}")
    if summary["projected_date"] is not None and summary["direction"] != "reached":
        lines.append(f"🔮 Прогноз: {summary['projected_date'].strftime('%d.%m.%Y')}")

    return "\n".join(lines)


async def goal_start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Начало создания цели."""
    context.user_data.clear()
    await update.message.reply_text(
        "🎯 <b>Новая цель</b>\n\n"
        "Шаг 1/3: Какой целевой вес?\n"
        "Отправь числом (например: 65)",
        parse_mode="HTML",
    )
    return TARGET_WEIGHT


async def edit_start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Начало изменения цели по кнопке."""
    query = update.callback_query
    await query.answer()

    goal_id = query.data.split(":", 2)[2]
    user_id = resolve_user_id(update.effective_user)

    try:
        goal = get_record_store().get_goal(user_id, goal_id)
    except StoreError:
        await query.message.reply_text("⚠️ Не удалось загрузить цель. Попробуй позже.")
        return ConversationHandler.END

    if not goal:
        await query.message.reply_text("⚠️ Цель не найдена.")
        return ConversationHandler.END

    context.user_data.clear()
    context.user_data["editing_id"] = goal.id
    context.user_data["start_date"] = goal.start_date

    await query.message.reply_text(
        "✏️ <b>Изменение цели</b>\n\n"
        f"Сейчас: {goal.target_weight:.1f} к {goal.target_date.strftime('%d.%m.%Y')}\n\n"
        "Шаг 1/3: Какой целевой вес?",
        parse_mode="HTML",
    )
    return TARGET_WEIGHT


async def target_weight_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Обработка целевого веса."""
    try:
        context.user_data["target_weight"] = parse_weight(update.message.text)
    except ValueError as e:
        await update.message.reply_text(f"❌ {e}")
        return TARGET_WEIGHT

    await update.message.reply_text(
        "✅ Целевой вес сохранен\n\n"
        "Шаг 2/3: К какой дате?\n"
        "Формат: ГГГГ-ММ-ДД или ДД.ММ.ГГГГ"
    )
    return TARGET_DATE


async def target_date_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Обработка срока цели."""
    try:
        target_date = parse_date(update.message.text)
        validate_goal_dates(context.user_data.get("start_date") or date.today(), target_date)
    except ValueError as e:
        await update.message.reply_text(f"❌ {e}")
        return TARGET_DATE

    context.user_data["target_date"] = target_date

    await update.message.reply_text(
        "✅ Срок сохранен\n\n"
        "Шаг 3/3: С какого веса начинаешь?\n"
        "Отправь числом или '0', чтобы считать от текущего веса"
    )
    return START_WEIGHT


async def start_weight_handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Обработка стартового веса и сохранение цели (новой или изменённой)."""
    try:
        start_weight = parse_optional_weight(update.message.text)
    except ValueError as e:
        await update.message.reply_text(f"❌ {e} (или '0')")
        return START_WEIGHT

    user_id = resolve_user_id(update.effective_user)
    editing_id = context.user_data.get("editing_id")
    goal = Goal(
        id=editing_id or uuid.uuid4().hex,
        user_id=user_id,
        target_weight=context.user_data["target_weight"],
        start_weight=start_weight,
        start_date=context.user_data.get("start_date") or date.today(),
        target_date=context.user_data["target_date"],
    )
    context.user_data.clear()

    store = get_record_store()
    try:
        if editing_id:
            saved = store.update_goal(goal)
        else:
            saved = store.create_goal(goal)
    except StoreError:
        logger.exception(f"Не удалось сохранить цель {user_id}")
        await update.message.reply_text("⚠️ Не удалось сохранить цель. Попробуй позже.")
        return ConversationHandler.END

    if saved is None:
        await update.message.reply_text("⚠️ Цель не найдена, возможно, она уже удалена.")
        return ConversationHandler.END

    title = "✏️ <b>Цель изменена!</b>" if editing_id else "🎉 <b>Цель создана!</b>"
    await update.message.reply_text(f"{title}\n\nПрогресс: /goals", parse_mode="HTML")
    return ConversationHandler.END


async def cancel(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Отмена создания цели."""
    await update.message.reply_text("❌ Создание цели отменено.")
    context.user_data.clear()
    return ConversationHandler.END


async def goals_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Список целей с прогрессом."""
    user_id = resolve_user_id(update.effective_user)

    try:
        overview = get_goals_overview(get_record_store(), user_id, date.today())
    except StoreError:
        await update.message.reply_text("⚠️ Не удалось загрузить цели. Попробуй позже.")
        return

    if not overview["goals"]:
        await update.message.reply_text("Целей пока нет. Поставь первую: /goal")
        return

    unit = weight_unit_label(overview["settings"])
    for goal, summary in zip(overview["goals"], overview["summaries"]):
        await update.message.reply_text(
            format_goal_summary(goal, summary, unit),
            reply_markup=get_goal_keyboard(goal.id),
            parse_mode="HTML",
        )


async def goal_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Удаление цели по кнопке."""
    query = update.callback_query
    await query.answer()

    goal_id = query.data.split(":", 2)[2]
    user_id = resolve_user_id(update.effective_user)

    try:
        deleted = get_record_store().delete_goal(user_id, goal_id)
    except StoreError:
        await query.message.reply_text("⚠️ Не удалось удалить цель. Попробуй позже.")
        return

    await query.edit_message_text("🗑 Цель удалена." if deleted else "⚠️ Цель не найдена.")


def register_handlers(application: Application) -> None:
    """Регистрация обработчиков."""
    conv_handler = ConversationHandler(
        entry_points=[
            CommandHandler("goal", goal_start),
            CallbackQueryHandler(edit_start, pattern=r"^goal:edit:"),
        ],
        states={
            TARGET_WEIGHT: [MessageHandler(filters.TEXT & ~filters.COMMAND, target_weight_handler)],
            TARGET_DATE: [MessageHandler(filters.TEXT & ~filters.COMMAND, target_date_handler)],
            START_WEIGHT: [MessageHandler(filters.TEXT & ~filters.COMMAND, start_weight_handler)],
        },
        fallbacks=[CommandHandler("cancel", cancel)],
    )
    application.add_handler(conv_handler)
    application.add_handler(CommandHandler("goals", goals_command))
    application.add_handler(CallbackQueryHandler(goal_callback, pattern=r"^goal:delete:"))
