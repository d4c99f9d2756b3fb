"""
Protocol definitions for the line chat relay.

This module defines the line codec and the exact text of every message the
server writes to its clients.
"""

import re
from datetime import datetime
from typing import Iterable, Optional

from common.constants import (
    ENCODING, LINE_TERMINATOR, TIMESTAMP_FORMAT,
    WELCOME_MESSAGE, NICKNAME_TAKEN_MESSAGE, ROSTER_MESSAGE,
    USER_JOINED_MESSAGE, USER_LEFT_MESSAGE, CHAT_RELAY_MESSAGE,
    MENTION_ALERT, UNNAMED_LABEL
)

# The whole line has to be the mention; "hi @bob" and " @bob" are not one.
MENTION_PATTERN = re.compile(r'@([A-Za-z]+)')


# Line codec

def encode_line(message: str) -> bytes:
    """Encode one outbound message as a newline-terminated line."""
    return (message + LINE_TERMINATOR).encode(ENCODING)


def decode_line(line: str) -> str:
    """Strip the line terminator (LF or CRLF) from a received line."""
    if line.endswith('\n'):
        line = line[:-1]
    if line.endswith('\r'):
        line = line[:-1]
    return line


def format_timestamp(moment: Optional[datetime] = None) -> str:
    return (moment or datetime.now()).strftime(TIMESTAMP_FORMAT)


def stamp_message(message: str, moment: Optional[datetime] = None) -> str:
    """Prefix a broadcast body with its HH.mm.ss timestamp."""
    return f"{format_timestamp(moment)} {message}"


def display_name(nickname: Optional[str]) -> str:
    return UNNAMED_LABEL if nickname is None else nickname


# Server to Client

def create_welcome_message() -> str:
    return WELCOME_MESSAGE


def create_nickname_taken_message() -> str:
    return NICKNAME_TAKEN_MESSAGE


def create_roster_message(other_nicknames: Iterable[str]) -> str:
    """Create the private roster line sent after a nickname is accepted."""
    names = list(other_nicknames)
    return ROSTER_MESSAGE.format(count=len(names), names='[' + ', '.join(names) + ']')


def create_user_joined_message(nickname: str) -> str:
    return USER_JOINED_MESSAGE.format(nickname=nickname)


def create_user_left_message(nickname: Optional[str]) -> str:
    return USER_LEFT_MESSAGE.format(nickname=display_name(nickname))


def create_chat_relay_message(nickname: str, text: str) -> str:
    return CHAT_RELAY_MESSAGE.format(nickname=nickname, text=text)


def create_mention_alert_message() -> str:
    return MENTION_ALERT


def extract_mention(line: str) -> Optional[str]:
    """Return the mentioned nickname if the entire line is an @mention."""
    match = MENTION_PATTERN.fullmatch(line)
    if match is None:
        return None
    return match.group(1)
