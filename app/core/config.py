import os
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional

class Settings(BaseSettings):
    PROJECT_NAME: str = "Task Reminder WIB"
    API_V1_STR: str = "/api/v1"

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = ["*"]

    # Database (Supabase Postgres in production)
    POSTGRES_SERVER: str = os.getenv("POSTGRES_SERVER", "localhost")
    POSTGRES_USER: str = os.getenv("POSTGRES_USER", "postgres")
    POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "postgres")
    POSTGRES_DB: str = os.getenv("POSTGRES_DB", "task_reminder")
    DATABASE_URL: Optional[str] = None

    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev_secret_key_change_me_in_prod")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7 # 7 days

    # Fonnte WhatsApp gateway
    FONNTE_API_URL: Optional[str] = "https://api.fonnte.com/send"
    FONNTE_API_TOKEN: Optional[str] = None
    FONNTE_COUNTRY_CODE: str = "62"
    FONNTE_TIMEOUT_SECONDS: float = 15.0

    # In-process sweep. Leave disabled when an external cron hits /send-reminders
    REMINDER_SCHEDULER_ENABLED: bool = False
    REMINDER_INTERVAL_MINUTES: int = 15
    # When set, /send-reminders requires a matching X-Cron-Secret header
    REMINDER_CRON_SECRET: Optional[str] = None

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=os.path.join(os.path.dirname(__file__), "..", "..", ".env"), case_sensitive=True, extra="ignore")

    def __init__(self, **data):
        super().__init__(**data)
        if not self.DATABASE_URL:
            self.DATABASE_URL = f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}/{self.POSTGRES_DB}"

settings = Settings()
