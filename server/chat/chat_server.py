"""
Chat server module.

This module owns the roster of connected sessions and the bounded chat
history. It interprets every received line, fans broadcasts out to the
roster and reaps sessions whose connection went away silently.

All roster and history mutation happens under one re-entrant lock. A
broadcast appends to history and snapshots its recipients in the same
critical section, then writes to the sockets with the lock released, so a
peer that stops reading never stalls registration or the liveness sweep.
"""

import socket
import threading
from collections import deque
from typing import Dict, List, Optional, Tuple

from common.constants import MAX_CHAT_HISTORY, HEARTBEAT_INTERVAL, ENCODING
from common.protocol_definitions import (
    create_welcome_message, create_nickname_taken_message, create_roster_message,
    create_user_joined_message, create_user_left_message, create_chat_relay_message,
    create_mention_alert_message, extract_mention, stamp_message
)
from server.chat.session import ChatSession, SessionState
from server.utils.logger import logger


class ChatServer:
    """Session manager: registration, message handling, broadcast, history, liveness."""

    def __init__(self, max_chat_history: int = MAX_CHAT_HISTORY,
                 heartbeat_interval: float = HEARTBEAT_INTERVAL, encoding: str = ENCODING):
        self.sessions: Dict[int, ChatSession] = {}  # session_id -> session, in connection order
        self.chat_history = deque(maxlen=max_chat_history)  # Keep last 10 broadcast lines
        self.next_session_id = 1
        self.encoding = encoding
        self.lock = threading.RLock()  # Protect roster and history

        self.heartbeat_interval = heartbeat_interval
        self.heartbeat_thread: Optional[threading.Thread] = None
        self._heartbeat_stop = threading.Event()

    def register_new_client(self, connection: socket.socket, address: Optional[Tuple] = None) -> ChatSession:
        """Wrap an accepted connection in a session and start serving it."""
        with self.lock:
            session_id = self.get_next_session_id()

        session = ChatSession(
            session_id, connection,
            message_handler=self.handle_message,
            disconnect_handler=self.handle_disconnect,
            address=address,
            encoding=self.encoding
        )
        logger.log_connection(address, session_id)

        # Welcome goes out before the session can receive any broadcast
        session.send_line(create_welcome_message())

        with self.lock:
            self.sessions[session_id] = session

        session.start()
        return session

    def handle_message(self, session_id: int, line: str):
        """Interpret one line received by a session."""
        session = self.get_session(session_id)
        if session is None:
            logger.debug(f"Dropping line from deregistered session={session_id}")
            return

        # Only the session's own thread changes its state
        if session.state is SessionState.UNNAMED:
            self._claim_nickname(session, line)
        else:
            self._relay_chat(session, line)

    def handle_disconnect(self, session_id: int):
        """Announce a departure and drop the session."""
        session = self.get_session(session_id)
        if session is None:
            return

        self.broadcast_to_all(create_user_left_message(session.nickname))
        self.deregister_client(session_id)
        logger.log_disconnect(session.label, session_id)

    def broadcast_to_all(self, message: str, exclude_session_id: Optional[int] = None) -> str:
        """
        Timestamp a message, record it in history and send it to every session.
        Optionally exclude a specific session by id.
        """
        stamped = stamp_message(message)

        # History append and recipient snapshot form one step; sends happen unlocked
        with self.lock:
            self.record_chat_message(stamped)
            recipients = [
                session for session in self.sessions.values()
                if exclude_session_id is None or session.session_id != exclude_session_id
            ]

        for session in recipients:
            if session.destroyed:
                logger.debug(f"Skipping destroyed session={session.session_id}")
                continue
            session.send_line(stamped)

        return stamped

    def deregister_client(self, session_id: int) -> bool:
        """Remove a session from the roster and stop it. Safe to call twice."""
        with self.lock:
            session = self.sessions.pop(session_id, None)

        if session is None:
            return False

        session.destroy()
        return True

    def record_chat_message(self, message: str):
        """Append to history; the oldest entry is evicted once the cap is reached."""
        with self.lock:
            self.chat_history.append(message)

    def heartbeat(self) -> int:
        """Deregister sessions whose connection reports itself closed."""
        with self.lock:
            stale = [session for session in self.sessions.values() if not session.is_connected()]

        for session in stale:
            logger.log_eviction(session.label, session.session_id)
            self.deregister_client(session.session_id)

        return len(stale)

    def start_heartbeat(self):
        """Run the liveness sweep on a background thread."""
        if self.heartbeat_thread is not None and self.heartbeat_thread.is_alive():
            return
        self._heartbeat_stop.clear()
        self.heartbeat_thread = threading.Thread(target=self._heartbeat_loop, name="chat-heartbeat", daemon=True)
        self.heartbeat_thread.start()

    def stop_heartbeat(self):
        self._heartbeat_stop.set()
        if self.heartbeat_thread:
            self.heartbeat_thread.join(timeout=1.0)
            self.heartbeat_thread = None

    def get_session(self, session_id: int) -> Optional[ChatSession]:
        with self.lock:
            return self.sessions.get(session_id)

    def get_roster(self) -> List[ChatSession]:
        """Snapshot of the roster in connection order."""
        with self.lock:
            return list(self.sessions.values())

    def get_history(self) -> List[str]:
        with self.lock:
            return list(self.chat_history)

    def get_next_session_id(self) -> int:
        """Get the next available session id."""
        session_id = self.next_session_id
        self.next_session_id += 1
        return session_id

    def get_participant_count(self) -> int:
        """Get the number of current sessions."""
        with self.lock:
            return len(self.sessions)

    def _claim_nickname(self, session: ChatSession, nickname: str):
        with self.lock:
            taken = any(other.nickname == nickname for other in self._named_sessions(exclude=session))
            if not taken:
                session.set_nickname(nickname)
                others = [other.nickname for other in self._named_sessions(exclude=session)]
                history = list(self.chat_history)

        if taken:
            session.send_line(create_nickname_taken_message())
            return

        logger.log_nickname(nickname, session.session_id)
        session.send_line(create_roster_message(others))
        for entry in history:
            session.send_line(entry)

        self.broadcast_to_all(create_user_joined_message(nickname))

    def _relay_chat(self, session: ChatSession, text: str):
        logger.log_chat(session.nickname, session.session_id, text)
        self.broadcast_to_all(create_chat_relay_message(session.nickname, text))

        mentioned = extract_mention(text)
        if mentioned is None:
            return

        with self.lock:
            target = next((other for other in self._named_sessions() if other.nickname == mentioned), None)
        if target is not None:
            target.send_line(create_mention_alert_message())

    def _named_sessions(self, exclude: Optional[ChatSession] = None) -> List[ChatSession]:
        return [
            other for other in self.sessions.values()
            if other is not exclude and other.state is SessionState.NAMED
        ]

    def _heartbeat_loop(self):
        while not self._heartbeat_stop.wait(self.heartbeat_interval):
            try:
                self.heartbeat()
            except Exception as e:
                logger.error(f"Liveness sweep failed: {e}", e)
