#!/usr/bin/env python3
"""
Line Chat Relay Client - Main Entry Point

Usage:
    python main_client.py [--server-ip HOST] [--port PORT]

The first line typed is your nickname; every line after that is a chat
message. A line consisting only of @name rings that user's terminal bell.
"""

import argparse
import sys

from common.constants import DEFAULT_HOST, DEFAULT_PORT
from client.chat.chat_client import ChatClient


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description='Line Chat Relay Client')
    parser.add_argument('--server-ip', type=str, default=DEFAULT_HOST,
                        help=f'Server IP address (default: {DEFAULT_HOST})')
    parser.add_argument('--port', type=int, default=DEFAULT_PORT,
                        help=f'Server port (default: {DEFAULT_PORT})')

    args = parser.parse_args()

    client = ChatClient(args.server_ip, args.port)
    if not client.connect():
        sys.exit(1)

    try:
        client.interactive_mode()
    except KeyboardInterrupt:
        print("\n[INFO] Interrupted by user")
        client.disconnect()


if __name__ == "__main__":
    main()
