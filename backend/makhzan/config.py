from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite:///./makhzan.db"

    # Application
    environment: str = "development"
    api_prefix: str = "/api"
    log_level: str = "INFO"

    # Persisted state blob
    state_name: str = "inventory-store"
    seed_sample_products: bool = True  # Only used on first run (no persisted blob)

    # Alert checks
    alert_check_enabled: bool = True
    alert_check_interval_minutes: int = 30
    expiry_warning_days: int = 7

    # Backups
    backup_dir: str = "./backups"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    return Settings()
