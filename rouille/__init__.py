"""Requests, responses, routing, sessions, error bodies and proxying for HTTP handlers."""

__version__ = "3.6.2"