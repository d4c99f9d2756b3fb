"""
Server package for the line chat relay.

This package contains all server-side functionality including:
- The TCP accept loop
- Per-connection chat sessions
- Roster, history and broadcast management
- Configuration and utilities
"""
