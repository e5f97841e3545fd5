"""Parse dice notation such as ``4d20`` or ``2 * (d6 + 3)`` and roll it."""

from __future__ import annotations

__version__ = "0.2.0"

from .dice import DiceExpression, roll_expression
from .errors import (
    DiceConfigError,
    DiceCountError,
    DiceEmptyError,
    DiceError,
    DiceRollError,
    DiceSyntaxError,
)
from .models import (
    BinaryArithmetic,
    CountedDice,
    Die,
    DieRoll,
    Expression,
    Numeric,
    ParserConfig,
    RollResult,
)
from .parser import DiceParser, build_expression, parse_expression, parse_primitive, to_postfix
from .tokenizer import tokenize

__all__ = [
    "BinaryArithmetic",
    "CountedDice",
    "DiceConfigError",
    "DiceCountError",
    "DiceEmptyError",
    "DiceError",
    "DiceExpression",
    "DiceParser",
    "DiceRollError",
    "DiceSyntaxError",
    "Die",
    "DieRoll",
    "Expression",
    "Numeric",
    "ParserConfig",
    "RollResult",
    "build_expression",
    "parse_expression",
    "parse_primitive",
    "roll_expression",
    "to_postfix",
    "tokenize",
]
