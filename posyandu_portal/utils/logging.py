import os
from loguru import logger
from posyandu_portal.core.config import settings

# Base directory for logs
LOG_DIR = settings.LOG_DIR
os.makedirs(LOG_DIR, exist_ok=True)

# Main app log
APP_LOG_PATH = os.path.join(LOG_DIR, "app.log")
logger.add(
    APP_LOG_PATH,
    rotation="10 MB",
    level=settings.LOG_LEVEL,
    enqueue=True,
    backtrace=True,
    diagnose=False,
    format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}",
)

# Backend failures (timeouts, upstream errors) only
BACKEND_LOG_PATH = os.path.join(LOG_DIR, "backend_errors.log")


def is_backend_record(record) -> bool:
    return record["extra"].get("component") == "backend"


logger.add(
    BACKEND_LOG_PATH,
    rotation="10 MB",
    level="WARNING",
    filter=is_backend_record,
    enqueue=True,
    backtrace=True,
    diagnose=False,
    format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}",
)

# Startup log
STARTUP_LOG_PATH = os.path.join(LOG_DIR, "startup", "startup.log")
os.makedirs(os.path.dirname(STARTUP_LOG_PATH), exist_ok=True)
logger.add(
    STARTUP_LOG_PATH,
    rotation="10 MB",
    level="INFO",
    enqueue=True,
    format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}",
)


def get_logger():
    """Return the global logger."""
    return logger


def get_backend_logger():
    """Logger whose records also land in backend_errors.log."""
    return logger.bind(component="backend")
