"""
Field validation.

A validator is any callable taking the field value and raising
InvalidValueError when the value is not acceptable. The validators below
treat None as "no value" and accept it; use Field.required (or not_empty())
to reject missing values.
"""

import re
from typing import Any, Callable, Optional


Validator = Callable[[Any], None]


class InvalidValueError(Exception):
    """Raised by a validator when a field value is invalid."""


def not_empty(message: str = "Value is required") -> Validator:
    """Reject None, empty strings and empty collections."""
    def check(value: Any) -> None:
        if is_empty(value):
            raise InvalidValueError(message)
    return check


def in_range(minimum: Optional[Any] = None, maximum: Optional[Any] = None,
             message: Optional[str] = None) -> Validator:
    """Reject values outside the inclusive range [minimum, maximum]."""
    def check(value: Any) -> None:
        if value is None:
            return
        if (minimum is not None and value < minimum) or (maximum is not None and value > maximum):
            raise InvalidValueError(message or f"Value {value!r} is outside [{minimum}, {maximum}]")
    return check


def max_length(length: int, message: Optional[str] = None) -> Validator:
    """Reject values longer than length."""
    def check(value: Any) -> None:
        if value is not None and len(value) > length:
            raise InvalidValueError(message or f"Value is longer than {length} characters")
    return check


def matches(pattern: str, message: Optional[str] = None) -> Validator:
    """Reject strings that do not fully match a regular expression."""
    compiled = re.compile(pattern)

    def check(value: Any) -> None:
        if value is None:
            return
        if not compiled.fullmatch(str(value)):
            raise InvalidValueError(message or f"Value {value!r} does not match {pattern}")
    return check


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, list, tuple, dict, set)):
        return len(value) == 0
    return False
