"""Structured logging setup for rancher_client.

Library modules only ever call :func:`get_logger` and emit semantic events
(``http_request_prepared``, ``http_response_received``, ...). Rendering is
decided once by the application through :func:`setup_logging`: a Rich console
for humans, JSON lines for machines, and optionally a JSON log file.
"""

import logging
import sys
from pathlib import Path
from typing import Any

import structlog
from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme


CUSTOM_THEME = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "bold red",
        "critical": "bold white on red",
        "debug": "dim white",
        "timestamp": "dim cyan",
        "path": "dim blue",
    }
)

# stdlib loggers that are too chatty below WARNING
NOISY_LOGGERS = ("httpx", "httpcore", "hpack")


def _shared_processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def _resolve_level(log_level_name: str) -> int:
    level = logging.getLevelName(log_level_name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level_name}")
    return level


def setup_logging(
    json_logs: bool = False,
    log_level_name: str = "INFO",
    log_file: str | Path | None = None,
    console_width: int | None = None,
) -> structlog.stdlib.BoundLogger:
    """Configure structlog and the stdlib root logger.

    Args:
        json_logs: Render JSON lines on stderr instead of the Rich console
        log_level_name: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path receiving JSON lines regardless of json_logs
        console_width: Optional console width override for Rich output

    Returns:
        A logger bound to this module, handy for a first startup event
    """
    level = _resolve_level(log_level_name)
    shared = _shared_processors()

    structlog.configure(
        processors=[
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handlers: list[logging.Handler] = []

    if json_logs:
        console_handler: logging.Handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                foreign_pre_chain=shared,
                processors=[
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    structlog.processors.format_exc_info,
                    structlog.processors.JSONRenderer(),
                ],
            )
        )
    else:
        console_handler = RichHandler(
            console=Console(theme=CUSTOM_THEME, width=console_width, stderr=True),
            show_time=False,
            show_path=level <= logging.DEBUG,
            rich_tracebacks=True,
            markup=False,
        )
        console_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                foreign_pre_chain=shared,
                processors=[
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    structlog.dev.ConsoleRenderer(colors=False),
                ],
            )
        )
    handlers.append(console_handler)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                foreign_pre_chain=shared,
                processors=[
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    structlog.processors.format_exc_info,
                    structlog.processors.JSONRenderer(),
                ],
            )
        )
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)
    logger.debug(
        "logging_configured",
        level=logging.getLevelName(level),
        json_logs=json_logs,
        log_file=str(log_file) if log_file else None,
        category="config",
    )
    return logger


def get_logger(name: str | None = None) -> Any:
    """Get a structlog logger for the given module name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        A lazily bound structlog logger
    """
    return structlog.get_logger(name)
