from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    # App
    app_name: str = "claimflow"
    debug: bool = False

    # Database
    database_url: str = "sqlite:///./claimflow.db"
    database_echo: bool = False

    # Logging
    log_level: str = "INFO"
    log_dir: str = "./logs"
    file_logging: bool = False
    console_logging: bool = True
    log_max_bytes: int = 10485760  # 10MB
    log_backup_count: int = 5

    # Presentation of amounts inside validation messages only
    currency_symbol: str = "R"

    model_config = SettingsConfigDict(
        env_prefix="CLAIMFLOW_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"  # Allow extra env vars without raising validation errors
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
