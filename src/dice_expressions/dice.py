from __future__ import annotations

import logging
import random
import secrets
from collections.abc import Iterator
from dataclasses import dataclass, field

from .errors import DiceRollError
from .models import (
    OPERATORS,
    BinaryArithmetic,
    CountedDice,
    Die,
    DieRoll,
    Expression,
    Number,
    Numeric,
    RollResult,
    format_number,
)


logger = logging.getLogger(__name__)

# Leaves never need parentheses.
_LEAF_PRECEDENCE = max(op.precedence for op in OPERATORS.values()) + 1


def _default_rng() -> random.Random:
    return secrets.SystemRandom()


def _roll_die(die: Die, rng: random.Random) -> DieRoll:
    return DieRoll.of(die.size, rng.randint(1, die.size))


def _postorder(expression: Expression) -> Iterator[Expression]:
    """Yield nodes children first, left before right, without recursing.

    Leaves therefore come out in the order they appear in the expression.
    """

    pending: list[tuple[Expression, bool]] = [(expression, False)]
    while pending:
        node, expanded = pending.pop()
        if isinstance(node, BinaryArithmetic) and not expanded:
            pending.append((node, True))
            pending.append((node.right, False))
            pending.append((node.left, False))
        else:
            yield node


def _apply(symbol: str, left: Number, right: Number) -> Number:
    try:
        return OPERATORS[symbol].apply(left, right)
    except ZeroDivisionError:
        raise DiceRollError("[DIVISION_BY_ZERO] Cannot divide by zero.") from None
    except OverflowError:
        raise DiceRollError(f"[OVERFLOW] Result of '{symbol}' is too large to represent.") from None


def roll_expression(expression: Expression, rng: random.Random | None = None) -> RollResult:
    """Evaluate an expression tree, sampling every die in it afresh.

    Dice are reported left to right as they appear in the expression.
    """

    if rng is None:
        rng = _default_rng()

    values: list[Number] = []
    dice_rolled: list[DieRoll] = []

    for node in _postorder(expression):
        if isinstance(node, BinaryArithmetic):
            right = values.pop()
            left = values.pop()
            values.append(_apply(node.operator, left, right))
        elif isinstance(node, Numeric):
            values.append(node.value)
        elif isinstance(node, Die):
            rolled = _roll_die(node, rng)
            dice_rolled.append(rolled)
            values.append(rolled.value)
        elif isinstance(node, CountedDice):
            rolls = [_roll_die(node.die, rng) for _ in range(node.count)]
            dice_rolled.extend(rolls)
            values.append(sum(r.value for r in rolls))
        else:
            raise TypeError(f"Not a dice expression: {node!r}")

    return RollResult(value=values[0], dice_rolled=tuple(dice_rolled))


def _render_leaf(node: Expression) -> str:
    if isinstance(node, Numeric):
        return format_number(node.value)
    if isinstance(node, Die):
        return f"d{node.size}"
    if isinstance(node, CountedDice):
        if node.count == 1:
            return f"d{node.die.size}"
        return f"{node.count}d{node.die.size}"
    raise TypeError(f"Not a dice expression: {node!r}")


def render(expression: Expression) -> str:
    """Render a tree back to canonical text, e.g. ``d20 + 2 * (1 - 3d6)``."""

    rendered: list[tuple[str, int]] = []

    for node in _postorder(expression):
        if not isinstance(node, BinaryArithmetic):
            rendered.append((_render_leaf(node), _LEAF_PRECEDENCE))
            continue

        precedence = OPERATORS[node.operator].precedence
        right, right_precedence = rendered.pop()
        left, left_precedence = rendered.pop()
        if left_precedence < precedence:
            left = f"({left})"
        # Same-precedence chains are left-associative, so a right child needs grouping.
        if right_precedence <= precedence:
            right = f"({right})"
        rendered.append((f"{left} {node.operator} {right}", precedence))

    return rendered[0][0]


@dataclass(frozen=True)
class DiceExpression:
    """A parsed dice expression. Call ``roll()`` any number of times."""

    input: str
    root: Expression
    tokens: tuple[str, ...] = ()
    dice_count: int = 0
    normalized_expression: str = field(init=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "normalized_expression", render(self.root))

    def roll(self, rng: random.Random | None = None) -> RollResult:
        result = roll_expression(self.root, rng)
        logger.debug("rolled %r => %s", self.input, result.value)
        return result
