"""
Chat client module.

This module handles client-side chat messaging: it connects to the relay,
prints every line the server sends and forwards the user's lines.
"""

import socket
import sys
import threading
from typing import Callable, Optional, TextIO

from common.constants import DEFAULT_HOST, DEFAULT_PORT, ENCODING, MENTION_ALERT
from common.protocol_definitions import encode_line, decode_line
from client.utils.logger import logger


class ChatClient:
    """Client-side chat functionality."""

    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT, encoding: str = ENCODING):
        self.host = host
        self.port = port
        self.encoding = encoding
        self.socket: Optional[socket.socket] = None
        self.receive_thread: Optional[threading.Thread] = None
        self.connected = False
        self.message_handler: Callable[[str], None] = self._print_line

    def set_message_handler(self, handler: Callable[[str], None]):
        """Set the message handler for incoming lines."""
        self.message_handler = handler

    def connect(self) -> bool:
        """Connect to the server and start listening for lines."""
        try:
            self.socket = socket.create_connection((self.host, self.port))
        except OSError as e:
            logger.error(f"Could not connect to {self.host}:{self.port}: {e}")
            return False

        self.connected = True
        self.receive_thread = threading.Thread(target=self._receive_loop, name="chat-client-receive", daemon=True)
        self.receive_thread.start()
        logger.info(f"Connected to {self.host}:{self.port}")
        return True

    def send_line(self, text: str) -> bool:
        """Send one line (a nickname or a chat message) to the server."""
        if not self.connected or self.socket is None:
            logger.error("Not connected to server")
            return False

        try:
            self.socket.sendall(encode_line(text))
            return True
        except OSError as e:
            logger.error(f"Failed to send message: {e}")
            self.connected = False
            return False

    def disconnect(self):
        self.connected = False
        if self.socket:
            try:
                self.socket.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
            self.socket.close()
            self.socket = None

    def interactive_mode(self, stdin: TextIO = sys.stdin):
        """Forward stdin lines until EOF or the server goes away."""
        for line in stdin:
            if not self.connected:
                break
            self.send_line(decode_line(line))
        self.disconnect()

    def _receive_loop(self):
        reader = self.socket.makefile('r', encoding=self.encoding, errors='replace', newline='\n')
        try:
            for raw in reader:
                self.message_handler(decode_line(raw))
        except (OSError, ValueError) as e:
            if self.connected:
                logger.warning(f"Connection error: {e}")
        finally:
            reader.close()
            if self.connected:
                logger.info("Server closed the connection")
            self.connected = False

    @staticmethod
    def _print_line(line: str):
        if line == MENTION_ALERT:
            # Ring the terminal bell without an empty line
            sys.stdout.write(MENTION_ALERT)
            sys.stdout.flush()
            return
        print(line)
