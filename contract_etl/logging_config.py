"""
Logging configuration for the Hotel Contracts ETL

The orchestrating process logs to a colorized console and, optionally, a
rotating log file. Pool worker processes log to the console only, tagged
with their process name; the rotating file has a single writer.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional, Union
import colorama

colorama.init()

CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
WORKER_FORMAT = '%(asctime)s - %(processName)s - %(name)s - %(levelname)s - %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class ColoredFormatter(logging.Formatter):
    """Colors the level name of console records"""

    COLORS = {
        'DEBUG': colorama.Fore.CYAN,
        'INFO': colorama.Fore.GREEN,
        'WARNING': colorama.Fore.YELLOW,
        'ERROR': colorama.Fore.RED,
        'CRITICAL': colorama.Fore.RED + colorama.Style.BRIGHT,
    }

    def format(self, record):
        # Color a copy; the file handler formats the same record afterwards
        color = self.COLORS.get(record.levelname)
        if color is None:
            return super().format(record)
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{colorama.Style.RESET_ALL}"
        return super().format(colored)


def resolve_level(level: Union[str, int]) -> int:
    """'debug' / 'INFO' / logging.WARNING -> numeric level (INFO if unknown)"""
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), logging.INFO)


def _console_handler(fmt: str) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setFormatter(ColoredFormatter(fmt, datefmt=DATE_FORMAT))
    return handler


def _rotating_file_handler(log_file: str, max_bytes: int, backup_count: int) -> logging.Handler:
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding='utf-8'
    )
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    log_file: Optional[str] = None,
    log_level: Union[str, int] = "INFO",
    max_bytes: int = 10485760,  # 10MB
    backup_count: int = 5
) -> logging.Logger:
    """
    Configure logging for the orchestrating process

    Args:
        log_file: Rotating log file (console only when None)
        log_level: Level name or number
        max_bytes: Size at which the log file rotates
        backup_count: Rotated files to keep

    Returns:
        The configured root logger
    """
    root = logging.getLogger()
    root.setLevel(resolve_level(log_level))
    root.handlers.clear()

    root.addHandler(_console_handler(CONSOLE_FORMAT))
    if log_file:
        root.addHandler(_rotating_file_handler(log_file, max_bytes, backup_count))

    return root


def setup_worker_logging(log_level: Union[str, int] = logging.INFO) -> None:
    """
    Process pool initializer: console-only logging for a worker

    Replaces handlers inherited through fork so worker processes never
    write to the parent's rotating file.
    """
    root = logging.getLogger()
    root.setLevel(resolve_level(log_level))
    root.handlers.clear()
    root.addHandler(_console_handler(WORKER_FORMAT))


def get_logger(name: str) -> logging.Logger:
    """Get logger instance for a module"""
    return logging.getLogger(name)
