from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str = ""
    SQL_ECHO: bool = False

    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD_HASH: str = ""
    JWT_SECRET: str = "fallback-secret"
    TOKEN_TTL_HOURS: int = 24

    # Only the activity-log routes are protected unless this is switched on
    REQUIRE_AUTH_FOR_WRITES: bool = False

    CORS_ORIGINS: list[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    @property
    def store_configured(self) -> bool:
        return bool(self.DATABASE_URL) and self.DATABASE_URL != "your_database_url_here"


settings = Settings()
