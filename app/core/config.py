from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Настройки базы данных
    DATABASE_USER: str
    DATABASE_PASSWORD: str
    DATABASE_HOST: str
    DATABASE_PORT: int
    DATABASE_NAME: str

    # Настройки JWT токенов (токены выпускает сервис авторизации, мы только читаем)
    SECRET_KEY: str
    ALGORITHM: str = "HS256"

    REDIS_HOST: str
    REDIS_PORT: int

    # Telegram-бот используется как транспорт уведомлений
    TELEGRAM_BOT_TOKEN: str
    ADMIN_CHAT_ID: Optional[int] = None

    # Все "сегодня" считаются в этой таймзоне
    TIMEZONE: str = "Asia/Seoul"

    # Правила фандингов
    FUNDING_MAX_DURATION_DAYS: int = 7
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    # Outbox уведомлений
    NOTIFICATION_DISPATCH_INTERVAL_SECONDS: int = 30
    NOTIFICATION_DISPATCH_BATCH_SIZE: int = 100
    NOTIFICATION_RETENTION_DAYS: int = 30

    @property
    def REDIS_URL(self) -> str:
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}"
    @property
    def DATABASE_URL(self) -> str:
        return f"postgresql+psycopg2://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"

    model_config = SettingsConfigDict(env_file=".env")

settings = Settings()
