"""Argument precondition helpers.

Every public query validates its arguments up front so that misuse is
rejected before any traversal begins.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from declscope.core.errors import PreconditionViolationError

T = TypeVar("T")

MessageSource = str | Callable[[], str]


def _render(message: MessageSource) -> str:
    return message() if callable(message) else message


def not_none(value: T | None, message: MessageSource) -> T:
    """Raise if value is None; return it otherwise."""
    if value is None:
        raise PreconditionViolationError.because(_render(message))
    return value


def not_blank(value: str | None, message: MessageSource) -> str:
    """Raise if value is None, empty, or whitespace only."""
    if value is None or not value.strip():
        raise PreconditionViolationError.because(_render(message))
    return value


def condition(predicate: bool, message: MessageSource) -> None:
    """Raise if predicate is false."""
    if not predicate:
        raise PreconditionViolationError.because(_render(message))
