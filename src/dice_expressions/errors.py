"""Exception hierarchy for dice expressions.

Every message starts with a stable bracketed code, e.g. ``[PARENTHESIS_MISMATCH]``,
so callers can match on the class or on the message prefix.
"""

from __future__ import annotations


class DiceError(ValueError):
    """Base for every user-facing failure, at parse time or while rolling."""


class DiceEmptyError(DiceError):
    """Raised when the input holds no tokens at all."""


class DiceSyntaxError(DiceError):
    """Raised for any lexical or structural problem in an expression."""

    def __init__(self, message: str, snippet: str | None = None) -> None:
        if snippet is not None:
            message = f"{message} Near: '{snippet}'."
        super().__init__(message)
        self.snippet = snippet


class DiceCountError(DiceError):
    """Raised when an expression introduces more dice than the parser allows."""

    def __init__(self, maximum: int, requested: int) -> None:
        super().__init__(
            f"[TOO_MANY_DICE] Expression rolls at least {requested} dice; the maximum is {maximum}."
        )
        self.maximum = maximum
        self.requested = requested


class DiceConfigError(DiceError):
    """Raised for invalid parser configuration."""


class DiceRollError(DiceError):
    """Raised when rolling an expression cannot produce a number."""
