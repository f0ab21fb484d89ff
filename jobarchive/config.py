import logging
import os
import sys
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import BaseModel, field_validator, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource
from typing_extensions import Self

QUIET_LOGGERS = ("asyncio", "aiosqlite", "sqlalchemy.engine")


def data_dir() -> Path:
    """Where the default SQLite database lives (JOBARCHIVE_DATA_DIR, else ~/.jobarchive)."""
    return Path(os.environ.get("JOBARCHIVE_DATA_DIR", "~/.jobarchive")).expanduser()


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Settings read from the YAML file named by JOBARCHIVE_CONFIG_FILE, if any."""

    def _read(self) -> dict[str, Any]:
        name = os.environ.get("JOBARCHIVE_CONFIG_FILE")
        if not name or not Path(name).is_file():
            return {}
        return yaml.safe_load(Path(name).read_text()) or {}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._read().get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        return self._read()


class Server(BaseModel):
    name: str = "Job Archive"
    version: str = "0.1.0"
    description: str = "Backend administration of job archives"


class DatabaseConfig(BaseModel):
    """Database settings. An empty ``url`` means the SQLite file under data_dir()."""

    url: str = ""
    echo: bool = False
    auto_migrate: bool = True  # create missing tables at startup
    busy_timeout: float = 30.0  # seconds a SQLite file writer waits for the lock


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @property
    def file(self) -> str | None:
        """Log to this file instead of stderr (JOBARCHIVE_LOG_FILE)."""
        return os.environ.get("JOBARCHIVE_LOG_FILE")


class ScheduleConfig(BaseModel):
    """Calendar used to split and merge job dates and times."""

    timezone: str = "UTC"
    datim_format: str = "%Y-%m-%d %H:%M"

    @field_validator("timezone")
    @classmethod
    def known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown timezone {value!r}") from e
        return value

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


class JwtConfig(BaseModel):
    """Verification settings for the bearer tokens that carry principal grants."""

    secret: str = ""  # required outside tests
    algorithm: str = "HS256"
    audience: str = "jobarchive"


class AuthConfig(BaseModel):
    jwt: JwtConfig = JwtConfig()


class TelemetryConfig(BaseModel):
    logfire: bool = False  # instrument FastAPI with logfire


class Config(BaseSettings):
    """Application settings.

    Sources, strongest first: constructor arguments, JOBARCHIVE_* environment
    variables (``__`` separates nested keys, e.g. JOBARCHIVE_DATABASE__URL),
    ``.env``, the YAML config file, secret files.
    """

    server: Server = Server()
    database: DatabaseConfig = DatabaseConfig()
    logging: LoggingConfig = LoggingConfig()
    schedule: ScheduleConfig = ScheduleConfig()
    auth: AuthConfig = AuthConfig()
    telemetry: TelemetryConfig = TelemetryConfig()

    model_config = {
        "env_prefix": "JOBARCHIVE_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    @model_validator(mode="after")
    def derive_database_url(self) -> Self:
        if not self.database.url:
            self.database = self.database.model_copy(
                update={"url": f"sqlite+aiosqlite:///{data_dir() / 'jobarchive.db'}"}
            )
        return self

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        yaml_settings = YamlConfigSettingsSource(settings_cls)
        return init_settings, env_settings, dotenv_settings, yaml_settings, file_secret_settings


def configure_logging(config: LoggingConfig) -> None:
    """Install a single root handler (stderr, or the log file when set).

    Call once at startup, before other modules log.
    """
    if config.file:
        log_path = Path(config.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_path)
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(config.level)
    handler.setFormatter(logging.Formatter(config.format, datefmt=config.date_format))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(config.level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        "Logging configured: level=%s file=%s", config.level, config.file
    )
