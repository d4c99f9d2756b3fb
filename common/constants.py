"""
Shared constants for the line chat relay.

This module contains all constants used across client and server components.
"""

# Network Configuration
DEFAULT_HOST = 'localhost'
DEFAULT_SERVER_HOST = '0.0.0.0'
DEFAULT_PORT = 1001
LISTEN_BACKLOG = 50

# Wire Format
ENCODING = 'utf-8'
LINE_TERMINATOR = '\n'

# Chat History
MAX_CHAT_HISTORY = 10

# Liveness sweep
HEARTBEAT_INTERVAL = 0.25  # seconds

# Broadcast timestamp prefix (24-hour, zero-padded, dot-separated)
TIMESTAMP_FORMAT = '%H.%M.%S'

# Outbound messages
WELCOME_MESSAGE = 'Welcome to my chat server! What is your nickname?'
NICKNAME_TAKEN_MESSAGE = 'This username is already taken! Please choose another one!'
ROSTER_MESSAGE = 'You are connected with {count} other users: {names}'
USER_JOINED_MESSAGE = '*{nickname} has joined the chat*'
USER_LEFT_MESSAGE = '*{nickname} has left the chat*'
CHAT_RELAY_MESSAGE = '<{nickname}> {text}'
MENTION_ALERT = '\a'

# Label used for sessions that never picked a nickname
UNNAMED_LABEL = 'unnamed'

# Logging
LOG_FORMAT = '%(asctime)s [%(levelname)s] %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
