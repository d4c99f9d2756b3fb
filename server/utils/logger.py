"""
Server logging module.

This module handles server-side logging functionality.
"""

import logging
from typing import Optional, Tuple

from common.constants import LOG_FORMAT, LOG_DATE_FORMAT


class ServerLogger:
    """Server logging class."""

    def __init__(self, log_level: int = logging.INFO):
        # Set up main logger
        self.logger = logging.getLogger('relay_server')
        self.logger.setLevel(log_level)

        # Remove existing handlers
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)

        # Create console handler
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))

        self.logger.addHandler(console_handler)

    def set_level(self, log_level: int):
        """Change the level of the logger and its handlers."""
        self.logger.setLevel(log_level)
        for handler in self.logger.handlers:
            handler.setLevel(log_level)

    def info(self, message: str):
        """Log info message."""
        self.logger.info(message)

    def error(self, message: str, cause: Optional[BaseException] = None):
        """Log error message, with the exception that caused it if any."""
        self.logger.error(message, exc_info=cause)

    def warning(self, message: str, cause: Optional[BaseException] = None):
        """Log warning message, with the exception that caused it if any."""
        self.logger.warning(message, exc_info=cause)

    def debug(self, message: str):
        """Log debug message."""
        self.logger.debug(message)

    def log_connection(self, addr: Optional[Tuple], session_id: int):
        """Log client connection."""
        self.info(f"New connection from {addr}, assigned session={session_id}")

    def log_nickname(self, nickname: str, session_id: int):
        """Log a nickname being claimed."""
        self.info(f"Session {session_id} is now known as '{nickname}'")

    def log_disconnect(self, label: str, session_id: int):
        """Log user disconnect."""
        self.info(f"User {label} (session={session_id}) disconnected")

    def log_chat(self, nickname: str, session_id: int, message: str):
        """Log chat message."""
        self.debug(f"Chat from {nickname} (session={session_id}): {message}")

    def log_eviction(self, label: str, session_id: int):
        """Log a session reaped by the liveness sweep."""
        self.info(f"Discarding disconnected client {label} (session={session_id})")

    def log_error(self, operation: str, error: Exception):
        """Log error with operation context."""
        self.error(f"Error in {operation}: {error}", error)


# Global logger instance
logger = ServerLogger()
