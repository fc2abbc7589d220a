"""
Logging for lrclib-fetcher

Two audiences, two outputs:
- The terminal shows only what the user needs: warnings, errors and messages
  logged through the console_* helpers. Lines are written with tqdm.write so
  they never tear the lyrics progress bar.
- The optional log file (rotated by size) receives every record at the
  configured level, including the resolver's per-tier debug trail.
"""

import logging
import logging.handlers
import re
import time
from pathlib import Path
from typing import Dict, Optional
import colorama
from colorama import Fore, Back, Style
from tqdm import tqdm

from ..config.settings import get_settings


colorama.init()

# Libraries whose chatter (connection pools, tag parsing) never belongs on screen
NOISY_LOGGERS = ['urllib3', 'requests', 'charset_normalizer', 'mutagen']

FILE_LOG_FORMAT = '%(asctime)s | %(name)-34s | %(levelname)-8s | %(threadName)-12s | %(message)s'

USER_FACING = 'console_output'

_SIZE_UNITS = {'B': 1, 'KB': 1024, 'MB': 1024 ** 2, 'GB': 1024 ** 3}


class ConsoleMessageFilter(logging.Filter):
    """Let through warnings and above, plus records flagged for the user"""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno >= logging.WARNING:
            return True
        return bool(getattr(record, USER_FACING, False)) or record.name.endswith('.console')


class ColoredFormatter(logging.Formatter):
    """Prefixes warnings and errors with a colored level tag"""

    LEVEL_STYLES: Dict[int, str] = {
        logging.DEBUG: Fore.CYAN,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.RED + Back.WHITE + Style.BRIGHT,
    }

    def __init__(self, use_colors: bool = True):
        super().__init__('%(message)s')
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if record.levelno < logging.WARNING:
            return message

        tag = f"{record.levelname}:"
        if self.use_colors:
            style = self.LEVEL_STYLES.get(record.levelno, Fore.RED)
            tag = f"{style}{tag}{Style.RESET_ALL}"
        return f"{tag} {message}"


class TqdmConsoleHandler(logging.Handler):
    """Console handler that prints above any active tqdm bar"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            tqdm.write(self.format(record))
        except Exception:
            self.handleError(record)


def parse_size(size_str: str) -> int:
    """
    Convert a human size such as "10MB" or "512 kb" to bytes

    Raises:
        ValueError: If the string is not a size
    """
    match = re.fullmatch(r'(\d+(?:\.\d+)?)\s*([KMG]?B)', str(size_str).strip().upper())
    if not match:
        raise ValueError(f"Invalid size format: {size_str}")

    number, unit = match.groups()
    return int(float(number) * _SIZE_UNITS[unit])


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    console_output: bool = True,
    colored_output: bool = True,
    max_size: str = "10MB",
    backup_count: int = 3
) -> None:
    """
    (Re)configure the root logger

    Existing handlers are closed first, so calling this again (e.g. after the
    CLI changes the level or log file) never duplicates output.

    Args:
        level: Level name for the root logger and the log file
        log_file: Log file path, or None for console only
        console_output: Attach the filtered terminal handler
        colored_output: Color level tags on the terminal
        max_size: Rotation threshold for the log file, e.g. "10MB"
        backup_count: Rotated files to keep
    """
    numeric_level = logging.getLevelName(str(level).upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    root = logging.getLogger()
    root.setLevel(numeric_level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    if console_output:
        console = TqdmConsoleHandler()
        console.addFilter(ConsoleMessageFilter())
        console.setFormatter(ColoredFormatter(use_colors=colored_output))
        root.addHandler(console)

    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        rotating = logging.handlers.RotatingFileHandler(
            path,
            maxBytes=parse_size(max_size),
            backupCount=backup_count,
            encoding='utf-8'
        )
        rotating.setLevel(numeric_level)
        rotating.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        root.addHandler(rotating)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger('lrclib_fetcher').debug(
        f"Logging ready (level={level}, console={console_output}, file={log_file})"
    )


def get_current_log_file() -> Optional[Path]:
    """Path of the active rotating log file, if any"""
    for handler in logging.getLogger().handlers:
        if isinstance(handler, logging.handlers.RotatingFileHandler):
            return Path(handler.baseFilename)
    return None


def get_logger(name: str) -> logging.Logger:
    """
    Module logger with user-facing helpers

    Besides the usual methods the logger gains console_info, console_warning,
    console_error and progress_update. console_info and progress_update log
    at INFO but are flagged so the terminal shows them.

    Args:
        name: Logger name, normally __name__
    """
    logger = logging.getLogger(name)
    to_console = {USER_FACING: True}

    logger.console_info = lambda message: logger.info(message, extra=to_console)
    logger.progress_update = lambda message: logger.info(message, extra=to_console)
    logger.console_warning = logger.warning
    logger.console_error = logger.error
    return logger


def configure_from_settings() -> None:
    """
    Apply the `logging` settings section

    A relative log file name is placed in the user config directory.
    """
    settings = get_settings()
    log_settings = settings.logging

    log_file = None
    if log_settings.file:
        path = Path(log_settings.file).expanduser()
        if not path.is_absolute():
            path = settings.get_config_directory() / path
        log_file = str(path)

    setup_logging(
        level=log_settings.level,
        log_file=log_file,
        console_output=log_settings.console_output,
        colored_output=log_settings.colored_output,
        max_size=log_settings.max_size,
        backup_count=log_settings.backup_count
    )


class OperationLogger:
    """
    Reports a long-running operation to the user

    Numeric progress drives a tqdm bar; everything is also logged at DEBUG
    for the log file, together with the elapsed time on completion.
    """

    def __init__(self, logger: logging.Logger, operation_name: str, show_progress: bool = True):
        self.logger = logger
        self.operation_name = operation_name
        self.show_progress = show_progress
        self.started_at: Optional[float] = None
        self.bar: Optional[tqdm] = None

    def start(self, message: Optional[str] = None) -> None:
        self.started_at = time.time()
        self.logger.console_info(message or f"🎵 Starting {self.operation_name}")
        self.logger.debug(f"{self.operation_name} started")

    def progress(self, message: str, current: Optional[int] = None, total: Optional[int] = None) -> None:
        """Record progress; with counts, advance the progress bar"""
        if current is None or not total:
            self.logger.debug(f"{self.operation_name}: {message}")
            if self.bar is None:
                self.logger.progress_update(f"⏳ {message}")
            return

        self.logger.debug(f"{self.operation_name}: {message} [{current}/{total}]")
        if not self.show_progress:
            return

        if self.bar is None:
            self.bar = tqdm(
                total=total,
                desc="🎤 Fetching lyrics",
                unit="file",
                bar_format="{desc} {n_fmt}/{total_fmt} {bar} {percentage:3.0f}%",
                ncols=100,
                colour='cyan'
            )
        self.bar.update(current - self.bar.n)

    def complete(self, message: Optional[str] = None) -> None:
        if self.bar is not None:
            self.bar.close()
            self.bar = None

        self.logger.console_info(message or f"✅ {self.operation_name} completed")
        if self.started_at is not None:
            self.logger.debug(f"{self.operation_name} finished in {time.time() - self.started_at:.2f}s")


# Logging is usable as soon as any module imports this one
try:
    configure_from_settings()
except (OSError, ValueError):
    # Unusable log file or size: keep the terminal output at least
    setup_logging(level="INFO", console_output=True)
