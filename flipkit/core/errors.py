"""Shared error codes and exceptions for feature flipping.

Construction-time failures (bad weights, intervals, timezones, expressions)
derive from ``ValueError`` so that pydantic wraps them into a
``ValidationError`` when raised from a model validator.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    INVALID_STRATEGY = "INVALID_STRATEGY"
    INVALID_EXPRESSION = "INVALID_EXPRESSION"
    INVALID_FEATURE = "INVALID_FEATURE"
    FEATURE_NOT_FOUND = "FEATURE_NOT_FOUND"
    FEATURE_ALREADY_EXISTS = "FEATURE_ALREADY_EXISTS"


class FlipkitError(Exception):
    """Base class for flipkit errors."""

    code: ErrorCode = ErrorCode.INVALID_STRATEGY

    def __init__(self, message: str, code: Optional[ErrorCode] = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code

    def __str__(self) -> str:
        return f"{self.code.value}: {super().__str__()}"


class InvalidStrategyError(FlipkitError, ValueError):
    """A strategy could not be built from the given configuration."""

    code = ErrorCode.INVALID_STRATEGY


class ExpressionSyntaxError(InvalidStrategyError):
    """A boolean feature expression is malformed."""

    code = ErrorCode.INVALID_EXPRESSION

    def __init__(self, message: str, expression: str, position: int) -> None:
        super().__init__(f"{message} at position {position} in {expression!r}")
        self.expression = expression
        self.position = position


class InvalidFeatureError(FlipkitError, ValueError):
    code = ErrorCode.INVALID_FEATURE


class FeatureNotFoundError(FlipkitError):
    code = ErrorCode.FEATURE_NOT_FOUND

    def __init__(self, uid: str) -> None:
        super().__init__(f"Feature '{uid}' does not exist")
        self.uid = uid


class FeatureAlreadyExistsError(FlipkitError):
    code = ErrorCode.FEATURE_ALREADY_EXISTS

    def __init__(self, uid: str) -> None:
        super().__init__(f"Feature '{uid}' already exists")
        self.uid = uid


__all__ = [
    "ErrorCode",
    "FlipkitError",
    "InvalidStrategyError",
    "ExpressionSyntaxError",
    "InvalidFeatureError",
    "FeatureNotFoundError",
    "FeatureAlreadyExistsError",
]
