# src/costseg/adapters/config.py
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    # App & logging
    ENV: str = Field(default="dev")
    LOG_LEVEL: str = Field(default="INFO")

    # persistence
    DB_URI: str = Field(default="sqlite:///costseg.db")

    # Study defaults (percent values: 37 means 37%)
    DEFAULT_TAX_RATE: float = Field(default=37.0)
    DEFAULT_DISCOUNT_RATE: float = Field(default=5.0)
    DEFAULT_BONUS_RATE: float = Field(default=100.0)

    # "total savings" shown to users is cumulative through this many years
    SAVINGS_HORIZON_YEARS: int = Field(default=5)

    STUDIES_DEFAULT_LIMIT: int = Field(default=50)

    model_config = SettingsConfigDict(
        env_prefix="COSTSEG_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator(
        "DEFAULT_TAX_RATE",
        "DEFAULT_DISCOUNT_RATE",
        "DEFAULT_BONUS_RATE",
        mode="before",
    )
    @classmethod
    def _to_percent(cls, v: Any) -> Any:
        if v is None:
            return v
        if isinstance(v, str):
            v = v.strip().replace("%", "")
        try:
            f = float(v)
        except Exception as err:
            raise ValueError("rate must be numeric or percent-like") from err
        if not (0.0 <= f <= 100.0):
            raise ValueError("rate must be between 0 and 100")
        return f

    @field_validator("SAVINGS_HORIZON_YEARS", mode="before")
    @classmethod
    def _horizon_positive(cls, v: Any) -> Any:
        n = int(v)
        if n < 1:
            raise ValueError("SAVINGS_HORIZON_YEARS must be >= 1")
        return n


config = AppConfig()
