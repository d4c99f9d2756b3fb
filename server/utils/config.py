"""
Server configuration module.

This module handles server-side configuration settings.
"""

from common.constants import (
    DEFAULT_SERVER_HOST, DEFAULT_PORT, MAX_CHAT_HISTORY, HEARTBEAT_INTERVAL,
    ENCODING, LISTEN_BACKLOG
)


class ServerConfig:
    """Server configuration class."""

    def __init__(self, host: str = DEFAULT_SERVER_HOST, port: int = DEFAULT_PORT,
                 max_chat_history: int = MAX_CHAT_HISTORY,
                 heartbeat_interval: float = HEARTBEAT_INTERVAL,
                 encoding: str = ENCODING):
        self.host = host
        self.port = port

        # Chat settings
        self.max_chat_history = max_chat_history

        # Connection settings
        self.heartbeat_interval = heartbeat_interval  # seconds
        self.backlog = LISTEN_BACKLOG
        self.encoding = encoding
