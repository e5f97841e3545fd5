from __future__ import annotations

import math
import operator
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Literal, TypeAlias

from .errors import DiceConfigError


Number: TypeAlias = int | float
ArithmeticSymbol: TypeAlias = Literal["+", "-", "*", "/"]


@dataclass(frozen=True)
class Operator:
    symbol: ArithmeticSymbol
    precedence: int
    apply: Callable[[Number, Number], Number]
    arity: int = 2


# Higher precedence binds tighter; equal precedence resolves left to right.
OPERATORS: dict[str, Operator] = {
    "+": Operator("+", 1, operator.add),
    "-": Operator("-", 1, operator.sub),
    "*": Operator("*", 2, operator.mul),
    "/": Operator("/", 2, operator.truediv),
}

GROUP_START = "("
GROUP_END = ")"
SEPARATOR = ","


@dataclass(frozen=True)
class Numeric:
    value: Number


@dataclass(frozen=True)
class Die:
    size: int


@dataclass(frozen=True)
class CountedDice:
    count: int
    die: Die


@dataclass(frozen=True)
class BinaryArithmetic:
    left: Expression
    right: Expression
    operator: ArithmeticSymbol


Expression: TypeAlias = Numeric | Die | CountedDice | BinaryArithmetic


@dataclass(frozen=True)
class DieRoll:
    """Outcome of a single die.

    ``is_min`` is never set for a one-sided die; only ``is_max`` is.
    """

    size: int
    value: int
    is_max: bool = False
    is_min: bool = False

    @classmethod
    def of(cls, size: int, value: int) -> DieRoll:
        return cls(
            size=size,
            value=value,
            is_max=value == size,
            is_min=value == 1 and size != 1,
        )


@dataclass(frozen=True)
class RollResult:
    value: Number
    dice_rolled: tuple[DieRoll, ...] = ()

    def explain(self) -> str:
        """Render an audit line such as ``d20=17, d6=1 => 18``."""
        parts = [f"d{d.size}={d.value}" for d in self.dice_rolled]
        if not parts:
            return f"=> {format_number(self.value)}"
        return ", ".join(parts) + f" => {format_number(self.value)}"


@dataclass(frozen=True)
class ParserConfig:
    maximum_dice_count: int | None = None

    def __post_init__(self) -> None:
        limit = self.maximum_dice_count
        if limit is None:
            return
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise DiceConfigError(
                f"[INVALID_CONFIG] Maximum dice count must be a positive integer or None, got {limit!r}."
            )


def format_number(value: Number) -> str:
    """Render a number the way the parser reads it back: no exponent, no trailing ``.0``."""
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        if math.isfinite(value):
            # repr() is the shortest round-tripping form; Decimal drops its exponent.
            return format(Decimal(repr(value)), "f")
    return str(value)
