"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

# Resolve .env relative to the project root
_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_FILE = _PROJECT_ROOT / ".env"

DEFAULT_BATCH_SIZE = 50000
DEFAULT_INPUT_FILENAME = "hdfs-logs-multitenants.json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- TiDB / MySQL connection ---
    tidb_host: str = "localhost"
    tidb_port: int = 4000
    tidb_user: str = "root"
    tidb_password: str = ""
    tidb_database: str = "test"
    db_driver: str = "mysql+mysqlconnector"
    db_connect_attempts: int = Field(3, ge=1)

    # --- Loader ---
    batch_size: int = Field(DEFAULT_BATCH_SIZE, ge=1)
    max_rows: int | None = Field(None, ge=0)
    asset_dir: str = ""
    input_filename: str = DEFAULT_INPUT_FILENAME
    severity_overflow: Literal["truncate", "reject"] = "truncate"

    # --- App ---
    log_level: str = "INFO"

    @property
    def database_url(self) -> URL:
        return URL.create(
            self.db_driver,
            username=self.tidb_user,
            password=self.tidb_password or None,
            host=self.tidb_host,
            port=self.tidb_port,
            database=self.tidb_database,
        )

    @property
    def input_path(self) -> Path:
        """Input file, relative to the current directory unless asset_dir is set."""
        if not self.asset_dir:
            return Path(self.input_filename)
        return Path(self.asset_dir) / self.input_filename


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
