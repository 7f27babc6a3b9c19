"""Logging configuration and utilities."""

import logging
import sys
from datetime import datetime
from typing import Optional

from config import LOG_DIR, LOG_FORMAT, LOG_LEVEL, LOG_TO_FILE


class LogManager:
    """Manages application logging with console and optional file output."""

    _instance: Optional['LogManager'] = None

    def __new__(cls) -> 'LogManager':
        """Ensure singleton instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize logging configuration if not already initialized."""
        if hasattr(self, '_initialized'):
            return

        self._initialized = True
        self.log_dir = LOG_DIR

        self.logger = logging.getLogger('pubchem_extractor')
        self.logger.setLevel(LOG_LEVEL)

        # Prevent duplicate handlers
        if not self.logger.handlers:
            self._setup_handlers()

    def _setup_handlers(self):
        """Configure the console handler and, when enabled, a daily log file."""
        formatter = logging.Formatter(LOG_FORMAT)

        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        console_handler.setLevel(LOG_LEVEL)
        self.logger.addHandler(console_handler)

        if LOG_TO_FILE:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            log_file = self.log_dir / f"pubchem_extractor_{datetime.now():%Y%m%d}.log"
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            file_handler.setLevel(LOG_LEVEL)
            self.logger.addHandler(file_handler)

    def set_level(self, level: str) -> None:
        """Change the level of the base logger and all of its handlers."""
        self.logger.setLevel(level)
        for handler in self.logger.handlers:
            handler.setLevel(level)

    def get_logger(self, name: str = None) -> logging.Logger:
        """
        Get a logger instance.

        Args:
            name: Optional name for the logger (will be prefixed with base logger name)

        Returns:
            Configured logger instance
        """
        if name:
            return self.logger.getChild(name)
        return self.logger
