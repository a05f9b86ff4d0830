# courier/config.py

from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    AUTH_SECRET_KEY: str
    AUTH_TOKEN_EXPIRE_MINUTES: int = 300        # 5 часов, как у исходного сервиса
    AUTH_REFRESH_EXPIRE_MINUTES: int = 7200     # 5 дней
    AUTH_ISSUER: str = "courier"
    AUTH_LOGIN: str = "merchant"                # учётка, создаваемая при старте
    AUTH_PASSWORD: str = "merchant"

    DATABASE_URL: str       # postgresql+asyncpg://... или sqlite+aiosqlite://...

    LOG_DIR: str = "log"
    LOG_PRINT: str = "1"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"
    )

    @property
    def log_print(self) -> bool:
        return self.LOG_PRINT.lower() in ("1", "true", "yes")

settings = Settings()
