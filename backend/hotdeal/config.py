"""Application configuration via Pydantic Settings."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hotdeal.core.exceptions import ConfigError


DEFAULT_CONFIG_PATH = Path("config.json")


class CrawlTarget(BaseModel):
    """A crawler identifier paired with the category it should crawl."""

    model_config = {"frozen": True}

    crawler: str
    category: str


class Settings(BaseSettings):
    """Run settings loaded from config.json and HOTDEAL_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="HOTDEAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    host: str = ""
    user: str = ""
    password: str = ""
    database: str = ""
    database_url: Optional[str] = None  # Overrides host/user/password/database
    db_echo: bool = False

    # Object storage (S3)
    access_key_id: str = ""
    secret_access_key: str = ""
    region: str = "ap-northeast-2"
    bucket: str = ""
    image_folder: str = "hotdeal"

    # Crawling
    crawl_targets: List[CrawlTarget] = [CrawlTarget(crawler="ppomppu", category="ppomppu")]
    max_workers: int = 5
    http_timeout: float = 10.0

    # Logging
    log_levels: List[str] = ["info", "warning", "error"]

    @field_validator("max_workers")
    @classmethod
    def check_max_workers(cls, value: int) -> int:
        if value < 1:
            raise ValueError("max_workers must be at least 1")
        return value

    @field_validator("log_levels")
    @classmethod
    def lower_log_levels(cls, value: List[str]) -> List[str]:
        return [level.lower() for level in value]

    @model_validator(mode="after")
    def check_database(self) -> "Settings":
        """Either a full database_url or host + database must be configured."""
        if not self.database_url and not (self.host and self.database):
            raise ValueError("database_url or host and database must be set")
        return self

    @property
    def image_relocation_enabled(self) -> bool:
        return bool(self.bucket and self.access_key_id and self.secret_access_key)


@dataclass(frozen=True)
class InitResult:
    """Outcome of loading settings; the entry point decides how to exit."""

    settings: Optional[Settings] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.settings is not None


def _read_config_file(path: Path) -> dict:
    try:
        with path.open(encoding="utf-8") as fp:
            data = json.load(fp)
    except (OSError, ValueError) as e:
        raise ConfigError(str(path), str(e)) from e

    if not isinstance(data, dict):
        raise ConfigError(str(path), "top-level JSON value must be an object")
    return data


def load_settings(config_path: Optional[Union[str, Path]] = None) -> InitResult:
    """Load settings from a JSON config file layered over the environment.

    When ``config_path`` is not given, ``config.json`` in the working
    directory is used if it exists; otherwise only environment variables
    are read. Values from the file win over the environment.

    Returns:
        InitResult carrying either the settings or the failure reason
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    try:
        overrides = {}
        if config_path or path.exists():
            overrides = _read_config_file(path)
        return InitResult(settings=Settings(**overrides))
    except ConfigError as e:
        return InitResult(error=e.message)
    except ValidationError as e:
        return InitResult(error=f"Invalid configuration: {e}")
