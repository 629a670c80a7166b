"""
Structured logging setup.

Modules log through structlog.get_logger(__name__); configure_logging()
installs the processor chain once at application startup.

Environment:
------------
    NOTIFIER_LOG_LEVEL=DEBUG   # any stdlib level name
    NOTIFIER_LOG_JSON=true     # JSON lines instead of console output
"""

import logging
from typing import Any, Optional

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Logging settings, overridable via NOTIFIER_LOG_ environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="NOTIFIER_LOG_",
        case_sensitive=False,
        extra="ignore",
    )

    level: str = Field(default="INFO", description="Minimum log level")
    json_logs: bool = Field(default=False, alias="NOTIFIER_LOG_JSON")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {v}")
        return level


def configure_logging(level: Optional[str] = None, json_logs: Optional[bool] = None) -> None:
    """
    Configure structlog for the notifier.

    Args:
        level: Minimum level name (default: LoggingSettings.level)
        json_logs: Render JSON lines instead of console output
            (default: LoggingSettings.json_logs)
    """
    settings = LoggingSettings()
    level_name = (level or settings.level).upper()
    render_json = settings.json_logs if json_logs is None else json_logs

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if render_json:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelNamesMapping()[level_name]
        ),
        cache_logger_on_first_use=False,
    )
