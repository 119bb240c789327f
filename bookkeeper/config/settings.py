"""
Configuration for the Bookkeeping Dashboard

Every setting comes from environment variables (or a .env file) through
pydantic-settings. There is one settings class per concern:
- GoogleSheetsSettings (GOOGLE_SHEETS_*): where the books live
- AppSettings: presentation and reminder behaviour

The dashboard still starts without Sheets configured; it then runs on the
in-memory sample store (see orchestrator.create_store).
"""

import warnings
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_DOTENV = {
    "env_file": ".env",
    "env_file_encoding": "utf-8",
    "extra": "ignore",
}


class GoogleSheetsSettings(BaseSettings):
    """Spreadsheet holding the Transactions and DueBills sheets."""

    model_config = SettingsConfigDict(env_prefix="GOOGLE_SHEETS_", **_DOTENV)

    credentials_path: str = Field(
        ...,
        description="Service account key file (JSON)"
    )
    spreadsheet_id: str = Field(
        ...,
        description="Key of the spreadsheet, as in its URL"
    )

    transactions_sheet_name: str = Field(default="Transactions")
    bills_sheet_name: str = Field(default="DueBills")

    @field_validator("credentials_path")
    @classmethod
    def warn_if_key_file_missing(cls, v: str) -> str:
        # The key may be mounted after the settings are first read
        if not Path(v).exists():
            warnings.warn(f"Google credentials file not found at {v}")
        return v


class AppSettings(BaseSettings):
    """Dashboard behaviour."""

    model_config = SettingsConfigDict(**_DOTENV)

    debug_mode: bool = Field(
        default=False,
        description="Log at DEBUG level"
    )

    currency_symbol: str = Field(
        default="₱",
        max_length=3,
        description="Symbol prefixed to formatted amounts"
    )

    due_soon_days: int = Field(
        default=7,
        ge=1,
        le=90,
        description="Days ahead in which a pending bill counts as due soon"
    )

    use_sample_data: bool = Field(
        default=False,
        description="Skip Google Sheets and run on built-in sample data"
    )


class Settings(BaseSettings):
    """
    All settings groups.

    Groups are built on access, so a missing Sheets configuration only
    fails the code that actually needs Sheets.
    """

    model_config = SettingsConfigDict(**_DOTENV)

    @property
    def google_sheets(self) -> GoogleSheetsSettings:
        return GoogleSheetsSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """Cached settings root. Tests call get_settings.cache_clear()."""
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Try to load every settings group.

    Returns {group: loaded} plus a "<group>_error" message for each group
    that failed. The settings page shows this as connection status.
    """
    settings = get_settings()
    results: dict = {}

    for group in ("google_sheets", "app"):
        try:
            getattr(settings, group)
        except Exception as e:
            results[group] = False
            results[f"{group}_error"] = str(e)
        else:
            results[group] = True

    return results
