from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable

from .dice import DiceExpression
from .errors import DiceCountError, DiceEmptyError, DiceSyntaxError
from .models import (
    GROUP_END,
    GROUP_START,
    OPERATORS,
    SEPARATOR,
    BinaryArithmetic,
    CountedDice,
    Die,
    Expression,
    Number,
    Numeric,
    ParserConfig,
)
from .tokenizer import tokenize


logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"^-?(?:\d+(?:\.\d*)?|\.\d+)$", re.ASCII)
_INTEGER_RE = re.compile(r"^-?\d+$", re.ASCII)


def _is_numeric(text: str) -> bool:
    return _NUMBER_RE.match(text) is not None


def _to_number(text: str) -> Number:
    try:
        value: Number = int(text) if _INTEGER_RE.match(text) else float(text)
    except ValueError:
        # int() refuses strings past sys.get_int_max_str_digits().
        raise DiceSyntaxError(f"[INVALID_NUMBER] Number is too long: '{text[:20]}...'.") from None
    if isinstance(value, float) and not math.isfinite(value):
        raise DiceSyntaxError(f"[INVALID_NUMBER] Number is too large: '{text[:20]}...'.")
    return value


def to_postfix(tokens: Iterable[str]) -> list[str]:
    """Reorder infix tokens into postfix (reverse-Polish) order via shunting-yard."""

    output: list[str] = []
    pending: list[str] = []

    for tok in tokens:
        if tok == GROUP_START:
            pending.append(tok)
            continue

        if tok == GROUP_END:
            while pending and pending[-1] != GROUP_START:
                output.append(pending.pop())
            if not pending:
                raise DiceSyntaxError("[PARENTHESIS_MISMATCH] Found ')' without a matching '('.")
            pending.pop()
            continue

        if tok == SEPARATOR:
            # Reserved for function arguments; there are no functions yet.
            while pending and pending[-1] != GROUP_START:
                output.append(pending.pop())
            if not pending:
                raise DiceSyntaxError("[MISPLACED_COMMA] ',' is only allowed inside parentheses.")
            continue

        op = OPERATORS.get(tok)
        if op is not None:
            while pending and pending[-1] in OPERATORS and OPERATORS[pending[-1]].precedence >= op.precedence:
                output.append(pending.pop())
            pending.append(tok)
            continue

        output.append(tok)

    while pending:
        tok = pending.pop()
        if tok == GROUP_START:
            raise DiceSyntaxError("[PARENTHESIS_MISMATCH] Found '(' without a matching ')'.")
        output.append(tok)

    return output


def parse_primitive(token: str) -> Numeric | CountedDice:
    """Turn a number or ``[count]d<size>`` token into a leaf expression."""

    lowered = token.lower()
    if "d" in lowered:
        parts = lowered.split("d")
        if len(parts) != 2:
            raise DiceSyntaxError(
                f"[INVALID_DICE] Too many letter d's in '{token}'. Example: '4d20'."
            )
        count_str, size_str = parts
        if not _is_numeric(size_str):
            raise DiceSyntaxError(
                f"[INVALID_DICE] Expected a die size after 'd' in '{token}'. Example: 'd20'."
            )
        count_str = count_str or "1"
        if not _is_numeric(count_str):
            raise DiceSyntaxError(
                f"[INVALID_DICE] Expected a dice count before 'd' in '{token}'. Example: '2d6'."
            )

        count = _to_number(count_str)
        if not isinstance(count, int) or count < 1:
            raise DiceSyntaxError(
                f"[INVALID_DIE_COUNT] Dice count must be a positive integer in '{token}'. Example: '2d6'."
            )
        size = _to_number(size_str)
        if not isinstance(size, int) or size < 1:
            raise DiceSyntaxError(
                f"[INVALID_DIE_SIZE] Die size must be a positive integer in '{token}'. Example: 'd20'."
            )
        return CountedDice(count=count, die=Die(size=size))

    if _is_numeric(token):
        return Numeric(value=_to_number(token))

    raise DiceSyntaxError(f"[UNRECOGNIZED_INPUT] Could not understand token '{token}'.")


def build_expression(
    postfix: Iterable[str], maximum_dice_count: int | None = None
) -> tuple[Expression, int]:
    """Build an expression tree from postfix tokens.

    Returns the root together with the number of dice it introduces.
    """

    stack: list[Expression] = []
    dice_count = 0

    for tok in postfix:
        op = OPERATORS.get(tok)
        if op is not None:
            if len(stack) < op.arity:
                raise DiceSyntaxError(
                    f"[ARGUMENT_COUNT] Operator '{tok}' needs {op.arity} operands."
                )
            right = stack.pop()
            left = stack.pop()
            stack.append(BinaryArithmetic(left=left, right=right, operator=op.symbol))
            continue

        node = parse_primitive(tok)
        if isinstance(node, CountedDice):
            dice_count += node.count
            if maximum_dice_count is not None and dice_count > maximum_dice_count:
                raise DiceCountError(maximum=maximum_dice_count, requested=dice_count)
        stack.append(node)

    if len(stack) > 1:
        raise DiceSyntaxError(
            "[MISSING_OPERATOR] Operands without an operator between them. Example: '2d6 + 3'."
        )
    if not stack:
        raise DiceSyntaxError("[ARGUMENT_COUNT] Nothing to evaluate.")
    return stack[0], dice_count


def parse_expression(text: str, config: ParserConfig | None = None) -> DiceExpression:
    """Parse ``text`` into a rollable expression. Raises DiceError on invalid input."""

    config = config or ParserConfig()

    tokens = tokenize(text)
    if not tokens:
        raise DiceEmptyError("[EMPTY_EXPRESSION] Empty input. Example: '2d6 + 3' or 'd20'.")
    logger.debug("tokens for %r: %s", text, tokens)

    postfix = to_postfix(tokens)
    logger.debug("postfix for %r: %s", text, postfix)

    root, dice_count = build_expression(postfix, config.maximum_dice_count)
    logger.debug("parsed %r introducing %d dice", text, dice_count)

    return DiceExpression(input=text, tokens=tuple(tokens), root=root, dice_count=dice_count)


class DiceParser:
    """Parses dice expressions under a fixed configuration.

    ``maximum_dice_count`` may be reassigned between parses; each ``parse``
    call reads it once at entry.
    """

    def __init__(self, maximum_dice_count: int | None = None) -> None:
        self.config = ParserConfig(maximum_dice_count=maximum_dice_count)

    @property
    def maximum_dice_count(self) -> int | None:
        return self.config.maximum_dice_count

    @maximum_dice_count.setter
    def maximum_dice_count(self, value: int | None) -> None:
        self.config = ParserConfig(maximum_dice_count=value)

    def parse(self, text: str) -> DiceExpression:
        return parse_expression(text, self.config)
