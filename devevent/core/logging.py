"""
Loguru configuration for the API process.

The console sink is always on. ``LOG_FILE`` adds a rotating file sink, and
``LOG_JSON`` switches both sinks to one JSON object per line. Records from
the standard ``logging`` module (uvicorn, sqlalchemy, alembic) are routed
through loguru so everything shares one format.
"""
import logging
import sys
from loguru import logger
from devevent.core.config import settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

STDLIB_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "sqlalchemy.engine", "alembic")


class InterceptHandler(logging.Handler):
    """Forward standard-library log records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find the caller outside the logging module so {name}:{line} stay useful
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _level() -> str:
    if settings.LOG_LEVEL:
        return settings.LOG_LEVEL.upper()
    return "DEBUG" if settings.ENVIRONMENT == "development" else "INFO"


logger.remove()

logger.add(
    sys.stdout,
    format=CONSOLE_FORMAT,
    level=_level(),
    colorize=not settings.LOG_JSON,
    serialize=settings.LOG_JSON,
)

if settings.LOG_FILE:
    logger.add(
        settings.LOG_FILE,
        rotation="500 MB",
        retention="10 days",
        compression="zip",
        format=FILE_FORMAT,
        level="INFO",
        serialize=settings.LOG_JSON,
    )

logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
for name in STDLIB_LOGGERS:
    stdlib_logger = logging.getLogger(name)
    stdlib_logger.handlers = [InterceptHandler()]
    stdlib_logger.propagate = False

__all__ = ["logger"]
