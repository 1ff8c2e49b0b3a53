from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    ENV: str = Field(default="dev")  # dev|prod
    TZ: str = Field(default="Europe/Madrid")

    # DB
    DATABASE_URL: str = Field(default="postgresql+psycopg://app:app@db:5432/app")

    # CORS
    CORS_ORIGINS: str = Field(default="http://localhost:3000,http://localhost")

    # Files
    EXPORT_DIR: str = Field(default="/app/data/exports")

    # Capacity rules
    WORKING_DAYS_DIVISOR: int = Field(default=20)
    DEFAULT_CAPACITY: float = Field(default=160.0)
    ABSENCE_PROJECT_PREFIX: str = Field(default="ABSENCES")
    SKILL_ORDER: list[str] = Field(
        default=["Project Management", "Análisis", "Diseño", "Construcción", "QA", "General"]
    )
    CONFLICTS_COUNT_ABSENCES: bool = Field(default=False)
    LEDGER_HORIZON_MONTHS: int = Field(default=12)

    # Batch writes
    BATCH_MAX_WORKERS: int = Field(default=1)


settings = Settings()
