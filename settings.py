"""Application settings loaded from the environment.

Every field can be overridden with a ``FILE_MANAGER_``-prefixed environment
variable (e.g. ``FILE_MANAGER_BACKEND=remote``). A ``.env`` file in the
project root is loaded first.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent

load_dotenv(BASE_DIR / ".env", override=False, encoding="utf-8")


class Settings(BaseSettings):
    """All runtime configuration of the file manager and its file server."""

    model_config = SettingsConfigDict(env_prefix="FILE_MANAGER_", extra="ignore")

    # Session
    backend: Literal["mock", "remote"] = Field(
        default="mock", description="Directory service the UI browses"
    )
    persistence: Literal["sqlite", "memory", "remote"] = Field(
        default="sqlite", description="Where mock snapshots are persisted"
    )
    database_path: Path = Field(
        default=BASE_DIR / "data" / "file-manager.db",
        description="SQLite file used by the sqlite persistence adapter",
    )
    root_path: str = Field(default="/", description="Navigation root of the mock filesystem")
    strict_names: bool = Field(
        default=False,
        description="Reject a file and a folder sharing a name in one directory",
    )

    # Remote file server (client side)
    remote_base_url: str = Field(default="http://localhost:3001")
    remote_timeout: float = Field(default=30.0, gt=0)
    remote_retry_enabled: bool = Field(default=False)
    remote_max_retries: int = Field(default=3, ge=0)
    remote_snapshot_path: str = Field(default="/.light-file-manager/file-system.json")

    # File server (server side)
    server_root: Path = Field(
        default_factory=Path.home, description="OS directory exposed under /api/fs"
    )
    server_host: str = Field(default="127.0.0.1")
    server_port: int = Field(default=3001)

    # Logging
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False)


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()
