"""Обработчики статистики."""
import logging
from datetime import date

from telegram import Update
from telegram.ext import Application, CommandHandler, CallbackQueryHandler, ContextTypes
from src.keyboards.menus import get_stats_period_keyboard
from src.services.chart_generator import generate_weekday_chart, generate_weight_chart
from src.services.dashboard_service import get_stats_overview
from src.services.record_store import StoreError, get_record_store
from src.services.user_service import resolve_user_id, weight_unit_label

logger = logging.getLogger(__name__)

PERIOD_NAMES = {
    "week": "неделю",
    "month": "месяц",
    "year": "год",
}


def format_stats(overview: dict) -> str:
    """Текст статистики за период."""
    stats = overview["stats"]
    unit = weight_unit_label(overview["settings"])
    period = PERIOD_NAMES[overview["time_range"].value]

    lines = [
        f"📊 <b>Статистика за {period}</b>\n",
        f"⚖️ Текущий вес: {stats['current_weight'] or 0:.1f} {unit}",
        f"📈 Средний: {stats['average']:.1f} {unit}",
        f"📉 Мин: {stats['min']:.1f} / Макс: {stats['max']:.1f} {unit}",
        f"🔻 От пика: {stats['weight_change']:.1f} {unit} ({stats['weight_change_percentage']:.1f}%)",
        f"📅 Дней с записями: {stats['days_logged']}",
        f"🔥 Серия: {stats['streak_days']} дн. подряд",
    ]

    weekdays = [bucket for bucket in overview["weekdays"] if bucket["count"]]
    if weekdays:
        lines.append("\n🗓 <b>По дням недели:</b>")
        for bucket in weekdays:
            lines.append(f"   {bucket['name']}: {bucket['average']:.1f} {unit} ({bucket['count']})")

    return "\n".join(lines)


async def stats_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Выбор периода статистики."""
    await update.message.reply_text(
        "📊 Выбери период для статистики:",
        reply_markup=get_stats_period_keyboard(),
    )


async def stats_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Обработка callback-кнопок статистики."""
    query = update.callback_query
    await query.answer()

    time_range = query.data.split(":", 1)[1]
    if time_range not in PERIOD_NAMES:
        return

    user_id = resolve_user_id(update.effective_user)
    try:
        overview = get_stats_overview(get_record_store(), user_id, time_range, date.today())
    except StoreError:
        await query.edit_message_text("⚠️ Не удалось загрузить статистику. Попробуй позже.")
        return

    if not overview["records"]:
        await query.edit_message_text(
            f"Нет записей за {PERIOD_NAMES[time_range]}. Добавь вес: /weight"
        )
        return

    await query.edit_message_text(format_stats(overview), parse_mode="HTML")

    unit = weight_unit_label(overview["settings"])
    charts = [
        generate_weight_chart(overview["records"], title=f"Вес за {PERIOD_NAMES[time_range]}, {unit}"),
        generate_weekday_chart(overview["weekdays"]),
    ]
    for chart in charts:
        if chart:
            await query.message.reply_photo(photo=chart)


def register_handlers(application: Application) -> None:
    """Регистрация обработчиков."""
    application.add_handler(CommandHandler("stats", stats_command))
    application.add_handler(CallbackQueryHandler(stats_callback, pattern=r"^stats:"))
