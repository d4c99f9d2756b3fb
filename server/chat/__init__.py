"""
Chat module for server-side messaging functionality.

Handles:
- Per-connection line reading and writing
- Nickname registration
- Broadcasting and message history
- Liveness sweeping of dead connections
"""
