"""Точка входа для Weight Tracker Bot."""
import logging
from telegram.ext import Application
from src.config import config
from src.database import init_db
from src.handlers import (
    register_start_handlers,
    register_record_handlers,
    register_goal_handlers,
    register_stats_handlers,
    register_settings_handlers,
)
from src.services.record_store import get_record_store

# Настройка логирования
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Запуск бота."""
    # Проверка конфигурации
    try:
        config.validate()
    except ValueError as e:
        logger.error(f"Ошибка конфигурации: {e}")
        return

    if config.STORAGE_BACKEND == "sql":
        logger.info("Инициализация базы данных...")
        init_db()
    get_record_store()

    # Создание приложения
    logger.info("Запуск бота...")
    application = Application.builder().token(config.BOT_TOKEN).build()

    # Регистрация обработчиков
    register_start_handlers(application)
    register_record_handlers(application)
    register_goal_handlers(application)
    register_stats_handlers(application)
    register_settings_handlers(application)

    application.run_polling(allowed_updates=["message", "callback_query"])


if __name__ == "__main__":
    main()
