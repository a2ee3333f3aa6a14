"""Logging helpers for heatwalk.

Four verbosity levels are supported. Loggers are plain ``logging`` loggers
under the ``heatwalk`` namespace; the console handler colours records by
level and the optional progress tracker wraps ``tqdm``.
"""

import logging
import os
import sys
from enum import Enum

from tqdm import tqdm

__all__ = [
    "LogLevel",
    "Colors",
    "Symbols",
    "SimpleFormatter",
    "HeatwalkLogger",
    "ProgressTracker",
    "setup_logging",
    "suppress_third_party_logs",
    "log_progress",
    "log_success",
    "log_detail",
    "log_warning",
    "log_error",
    "log_info",
    "log_debug",
]


class LogLevel(Enum):
    """Verbosity levels understood by the CLI and ``HEATWALK_LOG_LEVEL``."""

    QUIET = 0
    NORMAL = 1
    VERBOSE = 2
    DEBUG = 3


class Colors:
    """ANSI colour codes."""

    GRAY = "\033[90m"
    CYAN = "\033[36m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    RED = "\033[31m"
    BOLD = "\033[1m"
    RESET = "\033[0m"


class Symbols:
    """Unicode symbols for log messages."""

    CHECK = "✓"
    CROSS = "✗"
    ARROW = "→"
    CLOCK = "⏱"
    SUN = "☀"


class SimpleFormatter(logging.Formatter):
    """Formatter that only prints the message, coloured by level."""

    LEVEL_COLORS = {
        "DEBUG": Colors.GRAY,
        "INFO": Colors.CYAN,
        "WARNING": Colors.YELLOW,
        "ERROR": Colors.RED,
        "CRITICAL": Colors.RED + Colors.BOLD,
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelname, "")
        return f"{color}{record.getMessage()}{Colors.RESET}"


_LEVEL_MAP = {
    LogLevel.QUIET: logging.ERROR,
    LogLevel.NORMAL: logging.WARNING,
    LogLevel.VERBOSE: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
}


class HeatwalkLogger:
    """Central access point for heatwalk loggers."""

    _current_level: LogLevel = LogLevel.NORMAL

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        logger = logging.getLogger(name)
        cls._configure_logger_level(logger, cls._current_level)
        return logger

    @classmethod
    def _configure_logger_level(cls, logger: logging.Logger, level: LogLevel) -> None:
        # Worker processes inherit the level through the environment.
        env_level = os.getenv("HEATWALK_EFFECTIVE_LOG_LEVEL")
        if env_level:
            try:
                level = LogLevel[env_level.upper()]
            except KeyError:
                pass
        logger.setLevel(_LEVEL_MAP.get(level, logging.INFO))

    @classmethod
    def set_level(cls, level: LogLevel) -> None:
        cls._current_level = level
        os.environ["HEATWALK_EFFECTIVE_LOG_LEVEL"] = level.name
        for name in list(logging.root.manager.loggerDict):
            if name.startswith("heatwalk"):
                logging.getLogger(name).setLevel(_LEVEL_MAP[level])

    @classmethod
    def get_level(cls) -> LogLevel:
        return cls._current_level

    @classmethod
    def progress(cls, message: str, symbol: str = Symbols.ARROW) -> None:
        if cls._current_level.value >= LogLevel.NORMAL.value:
            cls.get_logger("heatwalk.progress").warning(f"{symbol} {message}")

    @classmethod
    def success(cls, message: str, symbol: str = Symbols.CHECK) -> None:
        if cls._current_level.value >= LogLevel.NORMAL.value:
            cls.get_logger("heatwalk.success").warning(f"{symbol} {message}")

    @classmethod
    def detail(cls, message: str, prefix: str = "  ") -> None:
        if cls._current_level.value >= LogLevel.VERBOSE.value:
            cls.get_logger("heatwalk.detail").info(f"{prefix} {message}")

    @classmethod
    def warning(cls, message: str) -> None:
        cls.get_logger("heatwalk.warning").warning(f"⚠ {message}")

    @classmethod
    def error(cls, message: str, symbol: str = Symbols.CROSS) -> None:
        cls.get_logger("heatwalk.error").error(f"{symbol} {message}")

    @classmethod
    def info(cls, message: str, logger_name: str = "heatwalk") -> None:
        if cls._current_level.value >= LogLevel.VERBOSE.value:
            cls.get_logger(logger_name).info(message)

    @classmethod
    def debug(cls, message: str, logger_name: str = "heatwalk") -> None:
        if cls._current_level.value >= LogLevel.DEBUG.value:
            cls.get_logger(logger_name).debug(message)


def setup_logging(level: LogLevel | None = None) -> None:
    """Configure the root logger.

    Without an explicit level, ``HEATWALK_LOG_LEVEL`` decides; the fallback
    is ``LogLevel.NORMAL``.
    """
    if level is None:
        env_level = os.getenv("HEATWALK_LOG_LEVEL", "").lower()
        level = {
            "quiet": LogLevel.QUIET,
            "verbose": LogLevel.VERBOSE,
            "debug": LogLevel.DEBUG,
        }.get(env_level, LogLevel.NORMAL)

    HeatwalkLogger.set_level(level)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(SimpleFormatter())
    handler.setLevel(_LEVEL_MAP.get(level, logging.INFO))
    root.addHandler(handler)
    root.setLevel(_LEVEL_MAP.get(level, logging.INFO))

    suppress_third_party_logs()


def suppress_third_party_logs() -> None:
    for name in ("joblib", "urllib3", "matplotlib", "numexpr"):
        logging.getLogger(name).setLevel(logging.WARNING)


class ProgressTracker:
    """Progress bar over a fixed list of named steps."""

    def __init__(self, steps: list[str]):
        self.steps = steps
        self.current = 0
        self.show_progress = HeatwalkLogger.get_level() != LogLevel.QUIET
        self.pbar = None
        if self.show_progress:
            self.pbar = tqdm(
                total=len(steps),
                desc=f"{Colors.CYAN}{Symbols.SUN} heatwalk{Colors.RESET}",
                bar_format="{desc} {bar} {n_fmt}/{total_fmt} [{elapsed}]",
            )

    def advance(self, message: str | None = None, status: str = "success") -> None:
        if self.pbar is None:
            self.current += 1
            return
        if message:
            color = Colors.GREEN if status == "success" else Colors.YELLOW
            symbol = Symbols.CHECK if status == "success" else Symbols.CROSS
            self.pbar.write(f"{color}{symbol} {message}{Colors.RESET}")
        self.pbar.update(1)
        self.current += 1

    def close(self) -> None:
        if self.pbar is None:
            return
        self.pbar.write(f"{Colors.GREEN}{Symbols.CHECK} Search completed{Colors.RESET}")
        self.pbar.close()


def log_progress(message: str, symbol: str = Symbols.ARROW) -> None:
    HeatwalkLogger.progress(message, symbol)


def log_success(message: str, symbol: str = Symbols.CHECK) -> None:
    HeatwalkLogger.success(message, symbol)


def log_detail(message: str, prefix: str = "  ") -> None:
    HeatwalkLogger.detail(message, prefix)


def log_warning(message: str) -> None:
    HeatwalkLogger.warning(message)


def log_error(message: str, symbol: str = Symbols.CROSS) -> None:
    HeatwalkLogger.error(message, symbol)


def log_info(message: str, logger_name: str = "heatwalk") -> None:
    HeatwalkLogger.info(message, logger_name)


def log_debug(message: str, logger_name: str = "heatwalk") -> None:
    HeatwalkLogger.debug(message, logger_name)
