from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from attendance_summary.config.operator import resolve_operator_id
from attendance_summary.config.user_settings_store import DEFAULT_APP_NAME, UserSettingsStore

log = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parents[3]
ENV_PATH = BASE_DIR / ".env"
load_dotenv(ENV_PATH)

APP_NAME = os.getenv("APP_NAME", DEFAULT_APP_NAME)
user_settings_store = UserSettingsStore()

APP_DATA_DIR = user_settings_store.app_data_dir


@dataclass(frozen=True)
class Settings:
    app_name: str = APP_NAME
    database_path: Path = Path(
        os.getenv("DATABASE_PATH", str(APP_DATA_DIR / "attendance_summary.db"))
    )
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    operator_id: str = resolve_operator_id()

    def describe(self) -> str:
        return (
            f"Settings(app_name={self.app_name}, "
            f"database_path={self.database_path}, "
            f"log_level={self.log_level}, "
            f"operator_id={self.operator_id})"
        )


settings = Settings()


def refresh_settings_from_store() -> Settings:
    """Rebuild the settings object from the current user store values."""

    global settings, APP_DATA_DIR  # noqa: PLW0603 - module-level singletons

    user_settings_store.reload()
    APP_DATA_DIR = user_settings_store.app_data_dir

    settings = Settings(
        app_name=APP_NAME,
        database_path=Path(os.getenv("DATABASE_PATH", str(APP_DATA_DIR / "attendance_summary.db"))),
        log_level=settings.log_level,
        operator_id=settings.operator_id,
    )
    log.debug("Settings refreshed: %s", settings.describe())
    return settings
