"""
Eternal Quest logging setup.

Log policy:
- logs/system.log: routine ledger activity (INFO+)
- logs/error.log: failures worth keeping after the session (ERROR+)
- logs/corruption_dump.log: every save-file line the loader skipped
- console: errors only; the menu already reports skipped lines itself

Save files are small and sessions short, so the rotating files stay small too.
"""
import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

from quest.paths import get_logs_dir

# Log directory
LOGS_DIR = get_logs_dir()

MAX_BYTES = 256 * 1024  # 256KB
BACKUP_COUNT = 2

ROOT_LOGGER_NAME = "eternal_quest"
CORRUPTION_DUMP = "corruption_dump.log"

FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def _rotating_handler(filename: str, level: int, formatter: logging.Formatter) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        LOGS_DIR / filename,
        maxBytes=MAX_BYTES,
        backupCount=BACKUP_COUNT,
        encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    log_level: int = logging.INFO,
    console_level: int = logging.ERROR
) -> logging.Logger:
    """
    Initialise logging.

    Args:
        log_level: system.log level (default INFO)
        console_level: stderr level (default ERROR, so warnings do not
            interleave with the menu)

    Returns:
        the configured package root logger
    """
    LOGS_DIR.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)  # handlers do the filtering

    # Avoid duplicate handlers on repeated setup
    logger.handlers.clear()

    file_format = logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    logger.addHandler(_rotating_handler("system.log", log_level, file_format))
    logger.addHandler(_rotating_handler("error.log", logging.ERROR, file_format))

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    logger.addHandler(console_handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Return a module logger.

    Args:
        name: module name, e.g. "storage", "recording"
    """
    if name:
        return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
    return logging.getLogger(ROOT_LOGGER_NAME)


def log_corruption(
    line_number: int,
    raw_line: str,
    error_msg: str,
    source: Optional[Union[str, Path]] = None
) -> None:
    """
    Record a skipped save-file line in the corruption dump.

    The dump keeps the raw text so a skipped goal can be repaired by hand.

    Args:
        line_number: 1-based line number in the save file
        raw_line: the raw line content
        error_msg: why the line was rejected
        source: save file the line came from
    """
    LOGS_DIR.mkdir(parents=True, exist_ok=True)
    where = f"{source}:{line_number}" if source else f"Line {line_number}"

    with open(LOGS_DIR / CORRUPTION_DUMP, "a", encoding="utf-8") as f:
        timestamp = datetime.now().isoformat(timespec="seconds")
        f.write(f"[{timestamp}] {where}: {error_msg}\n")
        f.write(f"  Raw: {raw_line}\n")
        f.write("-" * 50 + "\n")

    get_logger("storage").warning(f"Skipping corrupt line {where}: {error_msg}")
