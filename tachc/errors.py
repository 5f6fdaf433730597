"""
Base exception for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from TachUserError.

Programming errors and bugs should NOT inherit from TachUserError:
they will propagate with full tracebacks.
"""

from __future__ import annotations


class TachUserError(Exception):
    """
    Base class for all user-facing errors in tachc.

    These errors indicate problems that the user can fix:
    a broken config file, an unreadable input, a bad CLI argument.
    """
    pass


class ConfigError(TachUserError):
    """Invalid tachui.config.yaml contents."""
    pass


__all__ = ["TachUserError", "ConfigError"]
