"""Configuration system using pydantic-settings with environment variable loading."""

from decimal import Decimal
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class PricingSettings(BaseSettings):
    """Normalization engine parameters."""

    model_config = SettingsConfigDict(env_prefix="PRICING_")

    # CNY per USD used when the carbonate spot pair cannot imply a rate
    fallback_conversion_rate: Decimal = Decimal("6.98")


class HistorySettings(BaseSettings):
    """Prior-day baseline storage.

    The baseline is replaced wholesale by the save-history action and read
    back on every request. All fields configurable via HISTORY_ prefix.
    """

    model_config = SettingsConfigDict(env_prefix="HISTORY_")

    backend: Literal["memory", "file", "sqlite"] = "file"
    file_path: str = "data/history.json"
    db_path: str = "data/history.db"
    auto_save_start_hour: int = 7  # publisher saves history between these hours
    auto_save_end_hour: int = 9


class SourceSettings(BaseSettings):
    """Where the current price snapshot comes from."""

    model_config = SettingsConfigDict(env_prefix="SOURCE_")

    kind: Literal["static", "file", "smm"] = "static"
    snapshot_path: str = "data/snapshot.json"
    smm_url: str = "https://www.metal.com/Lithium"
    request_timeout_seconds: float = 30.0
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )


class DashboardSettings(BaseSettings):
    """Dashboard server configuration."""

    model_config = SettingsConfigDict(env_prefix="DASHBOARD_")

    host: str = "0.0.0.0"
    port: int = 8080
    cors_origins: list[str] = ["*"]


class PublishSettings(BaseSettings):
    """Static publisher output."""

    model_config = SettingsConfigDict(env_prefix="PUBLISH_")

    output_path: str = "public/prices.json"


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    pricing: PricingSettings = PricingSettings()
    history: HistorySettings = HistorySettings()
    source: SourceSettings = SourceSettings()
    dashboard: DashboardSettings = DashboardSettings()
    publish: PublishSettings = PublishSettings()
