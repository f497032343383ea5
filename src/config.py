"""Конфигурация бота из переменных окружения."""
import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

STORAGE_BACKENDS = ("sql", "memory")


@dataclass(frozen=True)
class Config:
    """Настройки бота."""

    BOT_TOKEN: str
    DATABASE_URL: str
    # sql — SQLAlchemy, memory — хранилище в памяти процесса (для разработки)
    STORAGE_BACKEND: str = "sql"
    ADMIN_ID: int | None = None
    LOG_LEVEL: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        """Загрузка конфигурации из окружения."""
        return cls(
            BOT_TOKEN=os.getenv("BOT_TOKEN", ""),
            DATABASE_URL=os.getenv("DATABASE_URL", "sqlite:///weight_tracker.db"),
            STORAGE_BACKEND=os.getenv("STORAGE_BACKEND", "sql").lower(),
            ADMIN_ID=int(os.getenv("ADMIN_ID")) if os.getenv("ADMIN_ID") else None,
            LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> None:
        """Проверка обязательных настроек."""
        if not self.BOT_TOKEN:
            raise ValueError("BOT_TOKEN не установлен в .env")
        if self.STORAGE_BACKEND not in STORAGE_BACKENDS:
            raise ValueError(
                f"Неизвестный STORAGE_BACKEND: {self.STORAGE_BACKEND} "
                f"(допустимо: {', '.join(STORAGE_BACKENDS)})"
            )


# Глобальный экземпляр конфигурации
config = Config.from_env()
