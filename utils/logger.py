"""
Logging for the AI App Catalog.

loguru is the only logging backend. Records from libraries that use the
standard logging module (uvicorn, APScheduler, Alembic) are forwarded into
the same sinks.

Usage:
    from utils import logger

    logger.info("Rankings refreshed")
"""
import logging
import sys
from pathlib import Path
from typing import Iterable

from loguru import logger

# Remove default handler
logger.remove()

_configured = False

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}"

FORWARDED_LOGGERS = ("uvicorn", "uvicorn.error", "apscheduler", "alembic")


class InterceptHandler(logging.Handler):
    """Send standard logging records to loguru, keeping the caller's location."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def forward_std_logging(names: Iterable[str] = FORWARDED_LOGGERS, level: str = "INFO") -> None:
    """Route the named standard loggers through loguru."""
    handler = InterceptHandler()
    for name in names:
        std_logger = logging.getLogger(name)
        std_logger.handlers = [handler]
        std_logger.setLevel(level)
        std_logger.propagate = False


def setup_logging(log_dir: Path = None, log_level: str = "INFO", app_name: str = "app"):
    """
    Configure sinks once per process.

    Args:
        log_dir: Directory for log files; None keeps console output only
        log_level: Minimum console level (DEBUG, INFO, WARNING, ERROR)
        app_name: Log file prefix ("api", "scheduler")

    Files written under log_dir:
        {app_name}_YYYY-MM-DD.log         INFO and above, rotated daily, 30 days
        {app_name}_errors_YYYY-MM-DD.log  ERROR and above with tracebacks, 90 days
    """
    global _configured

    if _configured:
        return

    logger.add(sys.stderr, level=log_level, format=CONSOLE_FORMAT)

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_dir / f"{app_name}_{{time:YYYY-MM-DD}}.log",
            level="INFO",
            format=FILE_FORMAT,
            rotation="00:00",
            retention="30 days",
            compression="gz",
            encoding="utf-8"
        )
        # Storage failures and unhandled request errors
        logger.add(
            log_dir / f"{app_name}_errors_{{time:YYYY-MM-DD}}.log",
            level="ERROR",
            format=FILE_FORMAT,
            rotation="00:00",
            retention="90 days",
            compression="gz",
            backtrace=True,
            diagnose=False,
            encoding="utf-8"
        )

    forward_std_logging(level=log_level)
    _configured = True

    if log_dir:
        logger.info(f"Logging configured for {app_name}. Log directory: {log_dir}")


def init_logging(app_name: str = "app"):
    """
    Configure logging from settings. Call once at process start.

    Args:
        app_name: Log file prefix ("api", "scheduler")
    """
    from config import settings, ensure_directories
    ensure_directories()
    setup_logging(log_dir=settings.LOG_DIR, log_level=settings.LOG_LEVEL, app_name=app_name)


__all__ = ["logger", "setup_logging", "init_logging", "forward_std_logging"]
