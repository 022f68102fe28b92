"""
Logging setup shared by the quotation server and client.

Both processes log to stderr, which is also where the client's fatal
diagnostics end up.
"""

import logging
import sys
from typing import Dict, Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Lowest level let through for chatty third-party loggers
LIBRARY_LEVELS: Dict[str, int] = {
    "urllib3": logging.WARNING,
    "werkzeug": logging.INFO,
}


class LoggerFactory:
    """Configures the root logger once per process and hands out named loggers."""

    _configured: bool = False

    @staticmethod
    def resolve_level(level: str) -> int:
        """Map a level name such as "debug" to its logging constant, INFO if unknown."""
        value = logging.getLevelName((level or "").strip().upper())
        return value if isinstance(value, int) else logging.INFO

    @classmethod
    def setup_logging(
        cls,
        level: str = "INFO",
        format_string: Optional[str] = None,
        force: bool = False,
    ) -> None:
        """
        Configure stderr logging for the process.

        Args:
            level: Level name taken from LOG_LEVEL or --log-level
            format_string: Record format (DEFAULT_FORMAT if None)
            force: Re-apply even when already configured, e.g. once flags are parsed
        """
        if cls._configured and not force:
            return

        root_level = cls.resolve_level(level)
        logging.basicConfig(
            format=format_string or DEFAULT_FORMAT,
            level=root_level,
            stream=sys.stderr,
            force=True,
        )
        for name, floor in LIBRARY_LEVELS.items():
            logging.getLogger(name).setLevel(max(root_level, floor))
        cls._configured = True

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Get a logger with the specified name."""
        if not cls._configured:
            cls.setup_logging()
        return logging.getLogger(name)
