from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LEDGER_RESILIENCE_",
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON lines; DEBUG level always uses the console renderer",
    )

    # Transactions
    require_idempotency_key: bool = Field(
        default=True,
        description="Refuse to submit transactions without an idempotency key",
    )


settings = Settings()
