"""Registry configuration, read from the environment and ``.env``."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    app_name: str = "Finding Sweetie"
    debug: bool = False
    log_level: str = "INFO"

    # Datastore; the file is created and migrated on startup
    database_url: str = "sqlite:///./findingsweetie.db"
    sql_echo: bool = False

    api_prefix: str = "/api"

    # Access tokens
    jwt_secret: str = "change-me-in-production-use-openssl-rand-hex-32"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24

    # Browsers fetch this to create a push subscription
    vapid_public_key: str = ""

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level.upper()


settings = Settings()
