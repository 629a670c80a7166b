"""Helpers shared by the facade and the compat adapters."""

from typing import Any
from uuid import uuid4


def generate_id() -> str:
    """Generate a unique notification id."""
    return f"notify_{uuid4().hex[:12]}"


def get_error_message(error: Any, fallback: str) -> str:
    """
    Extract a display message from a raised exception.

    Args:
        error: Exception (or any raised/rejected value)
        fallback: Message used when nothing usable can be extracted

    Returns:
        The exception text, the value itself when it is a string, or fallback
    """
    if isinstance(error, BaseException):
        text = str(error)
        return text if text else fallback
    if isinstance(error, str):
        return error
    return fallback
