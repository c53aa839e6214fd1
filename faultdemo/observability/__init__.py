"""Logging helpers for the demo service.

Everything is written as logfmt lines through structlog so that alert rules
can grep for fixed ``level=`` / ``msg=`` pairs.
"""
