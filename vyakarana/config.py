from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogFormat(str, Enum):
    JSON = "json"
    CONSOLE = "console"


class Settings(BaseSettings):
    """
    Central Configuration Registry.
    Strictly typed and validated via Pydantic.

    Every key can be overridden from the environment with the
    ``VYAKARANA_`` prefix (e.g. ``VYAKARANA_LOG_LEVEL=DEBUG``).
    """

    # --- Application Meta ---
    APP_NAME: str = "vyakarana-engine"

    # --- Logging ---
    LOG_LEVEL: str = "WARNING"
    LOG_FORMAT: LogFormat = LogFormat.CONSOLE

    # --- Verdict Confidence ---
    # Direct reads from the phoneme table
    TABLE_CONFIDENCE: float = Field(1.0, ge=0.0, le=1.0)
    # Predicates derived from table features by a named sutra
    DERIVED_CONFIDENCE: float = Field(1.0, ge=0.0, le=1.0)
    # Non-exclusive outcomes of optional (vibhasha) rules
    OPTIONAL_OUTCOME_CONFIDENCE: float = Field(0.5, ge=0.0, le=1.0)

    model_config = SettingsConfigDict(
        env_prefix="VYAKARANA_",
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
