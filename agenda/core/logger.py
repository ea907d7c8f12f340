"""
Unified logging system
Console output plus size-rotated agenda.log and error.log files,
all settings read from the [logging] section of the configuration
"""

import logging
import logging.handlers
import re
from pathlib import Path
from typing import Dict, List, Optional

from agenda.config.loader import get_config

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
)

_SIZE_UNITS = {
    "": 1,
    "B": 1,
    "K": 1024,
    "KB": 1024,
    "M": 1024**2,
    "MB": 1024**2,
    "G": 1024**3,
    "GB": 1024**3,
}

# Chatty libraries kept at WARNING unless the config says otherwise
DEFAULT_QUIET_LOGGERS = ["uvicorn.access", "httpx", "multipart"]


def parse_size(value) -> int:
    """Parse '10MB', '512 KB' or a plain byte count"""
    match = re.fullmatch(r"\s*(\d+)\s*([KMG]?B?)\s*", str(value).upper())
    if not match:
        raise ValueError(f"Invalid log file size: {value!r}")
    number, unit = match.groups()
    return int(number) * _SIZE_UNITS[unit]


class LoggerManager:
    """Log manager"""

    def __init__(self):
        self._loggers: Dict[str, logging.Logger] = {}
        self.logs_dir: Optional[Path] = None
        self._setup_root_logger()

    def _setup_root_logger(self):
        """(Re)configure the root logger from the current configuration"""
        config = get_config()

        level_name = str(config.get("logging.level", "INFO")).upper()
        self.logs_dir = Path(
            config.get(
                "logging.logs_dir", str(Path.home() / ".config" / "agenda" / "logs")
            )
        )
        max_bytes = parse_size(config.get("logging.max_file_size", "10MB"))
        backup_count = int(config.get("logging.backup_count", 5))
        quiet: List[str] = config.get("logging.quiet_loggers", DEFAULT_QUIET_LOGGERS)

        self.logs_dir.mkdir(parents=True, exist_ok=True)

        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, level_name, logging.INFO))
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()

        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        root_logger.addHandler(console_handler)

        root_logger.addHandler(
            self._rotating_handler("agenda.log", logging.DEBUG, max_bytes, backup_count)
        )
        root_logger.addHandler(
            self._rotating_handler("error.log", logging.ERROR, max_bytes, backup_count)
        )

        for name in quiet:
            logging.getLogger(name).setLevel(logging.WARNING)

    def _rotating_handler(
        self, filename: str, level: int, max_bytes: int, backup_count: int
    ) -> logging.Handler:
        handler = logging.handlers.RotatingFileHandler(
            self.logs_dir / filename,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(FILE_FORMAT))
        return handler

    def get_logger(self, name: str) -> logging.Logger:
        """Get logger with specified name"""
        if name not in self._loggers:
            self._loggers[name] = logging.getLogger(name)
        return self._loggers[name]


# Created on first use so importing a module never reads the config early
_logger_manager: Optional[LoggerManager] = None


def get_logger(name: str) -> logging.Logger:
    """Convenience function to get logger"""
    global _logger_manager

    if _logger_manager is None:
        _logger_manager = LoggerManager()

    return _logger_manager.get_logger(name)


def setup_logging():
    """Apply the logging section again, e.g. after loading another config file"""
    global _logger_manager

    if _logger_manager is None:
        _logger_manager = LoggerManager()
    else:
        _logger_manager._setup_root_logger()
