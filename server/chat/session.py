"""
Chat session module.

A ChatSession owns one client connection: it reads newline-terminated lines
on its own thread and writes lines back to the peer. It never touches the
roster or history itself; every received line and the end of the stream are
reported to the manager through the two handlers it was built with.
"""

import socket
import threading
from enum import Enum
from typing import Callable, Optional, TextIO, Tuple

from common.constants import ENCODING
from common.protocol_definitions import encode_line, decode_line, display_name
from server.utils.logger import logger


MessageHandler = Callable[[int, str], None]
DisconnectHandler = Callable[[int], None]


class SessionState(Enum):
    UNNAMED = 'unnamed'
    NAMED = 'named'


class ChatSession:
    """One connected client."""

    def __init__(self, session_id: int, connection: socket.socket,
                 message_handler: MessageHandler, disconnect_handler: DisconnectHandler,
                 address: Optional[Tuple] = None, encoding: str = ENCODING):
        self.session_id = session_id
        self.connection = connection
        self.address = address
        self.encoding = encoding
        self.state = SessionState.UNNAMED
        self.nickname: Optional[str] = None

        self._message_handler = message_handler
        self._disconnect_handler = disconnect_handler
        self._reader: Optional[TextIO] = None
        self._write_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._destroyed = False
        self._disconnect_reported = False
        self._read_closed = False
        self.thread: Optional[threading.Thread] = None

    @property
    def label(self) -> str:
        return display_name(self.nickname)

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def set_nickname(self, nickname: str):
        """Move the session to NAMED. Callers hold the manager lock."""
        self.nickname = nickname
        self.state = SessionState.NAMED

    def start(self):
        """Start the receive loop on a dedicated thread."""
        self._reader = self.connection.makefile('r', encoding=self.encoding, errors='replace', newline='\n')
        self.thread = threading.Thread(
            target=self._receive_loop,
            name=f"chat-session-{self.session_id}",
            daemon=True
        )
        self.thread.start()

    def send_line(self, message: str) -> bool:
        """Write one line to the peer. Failures are logged, never retried."""
        if self._destroyed:
            return False
        try:
            with self._write_lock:
                self.connection.sendall(encode_line(message))
            return True
        except OSError as e:
            failure = f"Failed to send to {self.label} (session={self.session_id}): {e}"
            if self._read_closed:
                # The peer already hung up; its departure is being handled
                logger.debug(failure)
            else:
                logger.warning(failure)
            return False

    def is_connected(self) -> bool:
        """Whether the underlying connection still looks alive."""
        if self._destroyed or self.connection.fileno() == -1:
            return False
        try:
            self.connection.getpeername()
        except OSError:
            return False
        return True

    def destroy(self):
        """Stop the receive loop and close the connection. Idempotent."""
        with self._state_lock:
            if self._destroyed:
                return
            self._destroyed = True

        try:
            self.connection.shutdown(socket.SHUT_RDWR)
        except OSError:
            # Already disconnected by the peer
            pass
        self.connection.close()

    def _report_disconnect(self):
        with self._state_lock:
            if self._destroyed or self._disconnect_reported:
                return
            self._disconnect_reported = True
        self._disconnect_handler(self.session_id)

    def _receive_loop(self):
        try:
            while True:
                try:
                    raw = self._reader.readline()
                except (OSError, ValueError) as e:
                    # ValueError: the socket file is already closed
                    if not self._destroyed:
                        logger.warning(f"I/O error with client {self.label} (session={self.session_id})", e)
                    break

                if not raw:
                    break

                try:
                    self._message_handler(self.session_id, decode_line(raw))
                except Exception as e:
                    logger.warning(f"Subscription error on client {self.label} (session={self.session_id})", e)
        finally:
            self._read_closed = True
            self._report_disconnect()
            try:
                self._reader.close()
            except OSError:
                pass
