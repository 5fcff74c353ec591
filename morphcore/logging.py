import os
import sys
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Final

from loguru import logger as _loguru_logger


class LogFormat(StrEnum):
    """Supported logging output formats."""

    STANDARD = "standard"
    JSON = "json"


class LogLevel(StrEnum):
    """Supported log levels."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass(frozen=True)
class LoggerConfig:
    """Configuration for logger setup.

    Args:
        level: Logging level
        format_type: Output format type
        service: Optional service name to include in log context
        use_stdout: Whether to use stdout instead of stderr
    """

    level: LogLevel = LogLevel.INFO
    format_type: LogFormat = LogFormat.STANDARD
    service: str | None = None
    use_stdout: bool = False


class MorphLogger:
    """Thin named facade over the process-wide loguru logger.

    Args:
        name: Logger name/identifier
        service: Optional service name bound into every record
    """

    def __init__(self, *, name: str, service: str | None = None) -> None:
        self._name = name
        self._logger = _loguru_logger.bind(logger_name=name, service=service or "")

    @property
    def name(self) -> str:
        return self._name

    def trace(self, message: str, **kwargs: Any) -> None:
        """Log trace message."""
        self._logger.opt(depth=1).trace(message, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message."""
        self._logger.opt(depth=1).debug(message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message."""
        self._logger.opt(depth=1).info(message, **kwargs)

    def success(self, message: str, **kwargs: Any) -> None:
        """Log success message."""
        self._logger.opt(depth=1).success(message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message."""
        self._logger.opt(depth=1).warning(message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error message."""
        self._logger.opt(depth=1).error(message, **kwargs)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log exception with traceback."""
        self._logger.opt(depth=1).exception(message, **kwargs)


_loggers: dict[str, MorphLogger] = {}
_sink_config: LoggerConfig | None = None

_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


def _config_from_env(*, service: str | None) -> LoggerConfig:
    """Build logger configuration from environment variables.

    Args:
        service: Optional service name to include in log context

    Returns:
        Logger configuration
    """
    level_env = os.getenv("LOGLEVEL", os.getenv("LOG_LEVEL", "INFO"))
    format_env = os.getenv("LOG_FORMAT", "standard")
    json_env = os.getenv("LOG_JSON", "false")

    format_type = LogFormat.JSON if json_env.lower() in _TRUTHY else LogFormat(format_env)
    return LoggerConfig(
        level=LogLevel(level_env.upper()),
        format_type=format_type,
        service=service,
    )


def _format_string(*, config: LoggerConfig) -> str:
    service_part = " | <blue>{extra[service]}</blue>" if config.service else ""
    return (
        "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
        f"<cyan>{{name}}</cyan>:<cyan>{{function}}</cyan>:<cyan>{{line}}</cyan>{service_part}"
        " - <level>{message}</level>"
    )


def configure_logging(*, config: LoggerConfig) -> None:
    """Replace the loguru sinks according to ``config``.

    Args:
        config: Logger configuration to apply
    """
    global _sink_config

    _loguru_logger.remove()
    output_stream = sys.stdout if config.use_stdout else sys.stderr

    if config.format_type == LogFormat.JSON:
        _loguru_logger.add(output_stream, level=config.level.value, serialize=True)
    else:
        _loguru_logger.add(
            output_stream,
            format=_format_string(config=config),
            level=config.level.value,
            colorize=True,
        )
    _sink_config = config


def get_logger(
    name: str, *, service: str | None = None, config: LoggerConfig | None = None
) -> MorphLogger:
    """Get or create a logger instance.

    The first call (or any call with an explicit ``config``) configures the
    process-wide sinks; later calls reuse them.

    Args:
        name: Logger name/identifier (use __name__ for module loggers)
        service: Optional service name to include in log context
        config: Optional specific configuration

    Returns:
        Configured logger instance

    Examples:
        logger = get_logger(__name__)
    """
    if config is not None:
        configure_logging(config=config)
    elif _sink_config is None:
        configure_logging(config=_config_from_env(service=service))

    cache_key = f"{name}:{service}" if service else name
    if cache_key not in _loggers:
        _loggers[cache_key] = MorphLogger(name=name, service=service)
    return _loggers[cache_key]


def setup_logging(*, service: str | None = None, json_logs: bool = False) -> None:
    """Reconfigure the sinks from the environment, e.g. at CLI start-up.

    Args:
        service: Optional service name to include in log context
        json_logs: Force JSON output regardless of ``LOG_FORMAT``/``LOG_JSON``
    """
    config = _config_from_env(service=service)
    if json_logs:
        config = LoggerConfig(
            level=config.level, format_type=LogFormat.JSON, service=config.service
        )
    configure_logging(config=config)
