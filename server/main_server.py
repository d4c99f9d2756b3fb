#!/usr/bin/env python3
"""
Line Chat Relay Server

Binds one TCP port, accepts connections forever and hands every accepted
socket to the ChatServer, which runs one receive thread per client.
"""

import socket
import threading
from typing import Optional, Tuple

from server.chat.chat_server import ChatServer
from server.utils.config import ServerConfig
from server.utils.logger import logger


class RelayServer:
    """Accept loop in front of the chat session manager."""

    def __init__(self, config: Optional[ServerConfig] = None):
        self.config = config or ServerConfig()
        self.chat_server = ChatServer(
            max_chat_history=self.config.max_chat_history,
            heartbeat_interval=self.config.heartbeat_interval,
            encoding=self.config.encoding
        )

        self.socket: Optional[socket.socket] = None
        self.accept_thread: Optional[threading.Thread] = None
        self.running = False

    @property
    def address(self) -> Optional[Tuple[str, int]]:
        """The bound (host, port), once bound."""
        if self.socket is None:
            return None
        return self.socket.getsockname()[:2]

    def bind(self):
        """Create and bind the listening socket."""
        if self.socket is not None:
            return
        server_socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        server_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            server_socket.bind((self.config.host, self.config.port))
            server_socket.listen(self.config.backlog)
        except OSError:
            server_socket.close()
            raise
        self.socket = server_socket
        logger.info(f"Server listening on {self.address}")

    def start(self):
        """Start the accept loop and the liveness sweep in the background."""
        self.bind()
        self.running = True
        self.chat_server.start_heartbeat()

        self.accept_thread = threading.Thread(target=self._accept_loop, name="chat-accept", daemon=True)
        self.accept_thread.start()

    def serve_forever(self):
        """Run the accept loop on the calling thread."""
        self.bind()
        self.running = True
        self.chat_server.start_heartbeat()
        self._accept_loop()

    def stop(self):
        """Stop accepting, stop the sweep and drop every session."""
        logger.info("Stopping server...")
        self.running = False

        if self.socket:
            # shutdown() wakes a thread blocked in accept(); close() alone does not on Linux
            try:
                self.socket.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
            self.socket.close()

        if self.accept_thread:
            self.accept_thread.join(timeout=1.0)

        self.chat_server.stop_heartbeat()
        for session in self.chat_server.get_roster():
            self.chat_server.deregister_client(session.session_id)

        logger.info("Server stopped")

    def _accept_loop(self):
        while self.running:
            try:
                connection, addr = self.socket.accept()
            except OSError as e:
                if not self.running:
                    break
                logger.warning(f"I/O error while accepting: {e}", e)
                continue

            try:
                self.chat_server.register_new_client(connection, addr)
            except Exception as e:
                logger.log_error("register_new_client", e)
                connection.close()
