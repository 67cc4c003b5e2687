import os
from dotenv import load_dotenv
from urllib.parse import quote_plus

load_dotenv()


class Settings:
    # Environment setting
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")

    # db creds
    DB_HOST = os.getenv("DB_HOST", "localhost")
    DB_USER = os.getenv("DB_USER", "postgres")
    DB_PASSWORD = os.getenv("DB_PASSWORD", "")
    DB_NAME = os.getenv("DB_NAME", "sleep_tracker")
    DB_PORT = os.getenv("DB_PORT", "5432")

    # Redis cache, in-memory cache is used when unset
    REDIS_URL = os.getenv("REDIS_URL")

    # Cache TTLs (seconds)
    USER_CACHE_TTL_SECONDS = int(os.getenv("USER_CACHE_TTL_SECONDS", "3600"))
    FOLLOWING_CACHE_TTL_SECONDS = int(os.getenv("FOLLOWING_CACHE_TTL_SECONDS", "1800"))
    STATISTICS_CACHE_TTL_SECONDS = int(os.getenv("STATISTICS_CACHE_TTL_SECONDS", "3600"))

    LOG_DIR = os.getenv("LOG_DIR", "logs")

    def _build_database_url(self):
        explicit_url = os.getenv("DATABASE_URL")
        if explicit_url:
            return explicit_url
        return (
            f"postgresql+asyncpg://{self.DB_USER}:{quote_plus(self.DB_PASSWORD)}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def DATABASE_URL(self):
        return self._build_database_url()

    @property
    def IS_DEVELOPMENT(self):
        return self.ENVIRONMENT == "development"


settings = Settings()
