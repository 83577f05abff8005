"""Shared helpers for the classroll application."""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable, TypeVar

from flask import current_app
from google.api_core.exceptions import GoogleAPIError

from .errors import StoreError, ValidationError

F = TypeVar("F", bound=Callable[..., Any])


def store_operation(description: str) -> Callable[[F], F]:
    """Log Firestore failures and re-raise them as ``StoreError``.

    Usage:
    @store_operation("submitting attendance")
    def submit(...):
        ...
    """

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except GoogleAPIError as e:
                current_app.logger.error(f"Error {description}: {e}")
                raise StoreError(
                    f"Error {description}. Please try again."
                ) from e

        return wrapper  # type: ignore[return-value]

    return decorator


def parse_int(value: Any, field: str, minimum: int, maximum: int) -> int:
    """Parse a bounded integer from request input."""
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"'{field}' must be a whole number.") from None
    if not minimum <= number <= maximum:
        raise ValidationError(f"'{field}' must be between {minimum} and {maximum}.")
    return number
