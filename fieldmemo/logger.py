"""
Field Memo logging setup.

Log layout:
- logs/system.log: routine operations (INFO+)
- logs/error.log: stack traces (ERROR/CRITICAL)
- console: only what the user should see (WARNING+)

RotatingFileHandler keeps the files bounded.
"""
import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Optional

from fieldmemo.paths import LOGS_DIR

ROOT_LOGGER_NAME = "field_memo"

MAX_BYTES = 2 * 1024 * 1024  # 2MB
BACKUP_COUNT = 3


def setup_logging(
    log_level: int = logging.INFO,
    console_level: int = logging.WARNING
) -> logging.Logger:
    """
    Configure the field_memo logger tree.

    Args:
        log_level: level for logs/system.log
        console_level: level for stderr

    Returns:
        The configured root logger of the package.
    """
    LOGS_DIR.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)  # handlers filter
    logger.handlers.clear()

    file_format = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    console_format = logging.Formatter("[%(levelname)s] %(message)s")

    system_handler = RotatingFileHandler(
        LOGS_DIR / "system.log",
        maxBytes=MAX_BYTES,
        backupCount=BACKUP_COUNT,
        encoding="utf-8"
    )
    system_handler.setLevel(log_level)
    system_handler.setFormatter(file_format)
    logger.addHandler(system_handler)

    error_handler = RotatingFileHandler(
        LOGS_DIR / "error.log",
        maxBytes=MAX_BYTES,
        backupCount=BACKUP_COUNT,
        encoding="utf-8"
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(file_format)
    logger.addHandler(error_handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(console_format)
    logger.addHandler(console_handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Return a module logger, e.g. get_logger("history") -> field_memo.history.
    """
    if name:
        return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
    return logging.getLogger(ROOT_LOGGER_NAME)


def log_corruption(source: str, raw: str, error_msg: str) -> None:
    """
    Append an unreadable storage payload to logs/corruption_dump.log.

    Args:
        source: where the payload came from (file path or storage key)
        raw: the raw text, truncated before writing
        error_msg: parser error description
    """
    logger = get_logger("persistence")
    logger.warning("Unreadable calendar data in %s: %s", source, error_msg)

    try:
        LOGS_DIR.mkdir(parents=True, exist_ok=True)
        with open(LOGS_DIR / "corruption_dump.log", "a", encoding="utf-8") as f:
            f.write(f"[{datetime.now().isoformat()}] {source}: {error_msg}\n")
            f.write(f"  Raw: {raw[:500]}\n")
            f.write("-" * 50 + "\n")
    except OSError as e:
        logger.warning("Could not write corruption dump: %s", e)
