#!/usr/bin/env python3
"""
Line Chat Relay Server - Main Entry Point

Clients connect over plain TCP (telnet, nc or main_client.py), pick a
nickname and exchange newline-delimited text with everyone connected.

Usage:
    python main_server.py

Optional arguments:
    --host HOST           Bind address (default: 0.0.0.0)
    --port PORT           TCP port (default: 1001)
    --log-level LEVEL     DEBUG, INFO, WARNING or ERROR (default: INFO)
"""

import argparse
import logging

from common.constants import DEFAULT_SERVER_HOST, DEFAULT_PORT
from server.main_server import RelayServer
from server.utils.config import ServerConfig
from server.utils.logger import logger


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description='Line Chat Relay Server')
    parser.add_argument('--host', type=str, default=DEFAULT_SERVER_HOST,
                        help=f'Host to bind to (default: {DEFAULT_SERVER_HOST})')
    parser.add_argument('--port', type=int, default=DEFAULT_PORT,
                        help=f'TCP port (default: {DEFAULT_PORT})')
    parser.add_argument('--log-level', type=str, default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Log level (default: INFO)')

    args = parser.parse_args()
    logger.set_level(getattr(logging, args.log_level))

    server = RelayServer(ServerConfig(host=args.host, port=args.port))
    try:
        server.bind()
        print("started!")
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Server shutting down...")
        server.stop()
    except OSError as e:
        logger.error(f"Server failed to start: {e}", e)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
