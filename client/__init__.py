"""
Client package for the line chat relay.

A terminal client that prints what the server sends and forwards typed lines.
"""
