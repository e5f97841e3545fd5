from __future__ import annotations

import re

from .errors import DiceSyntaxError
from .models import GROUP_END, GROUP_START, OPERATORS, SEPARATOR


_WORD_RE = re.compile(r"\w", re.ASCII)
_DIGIT_RE = re.compile(r"\d", re.ASCII)

_DELIMITERS = {GROUP_START, GROUP_END, SEPARATOR}

SNIPPET_RADIUS = 20


def _is_word(c: str) -> bool:
    return _WORD_RE.fullmatch(c) is not None


def _is_digit(c: str) -> bool:
    return _DIGIT_RE.fullmatch(c) is not None


def _is_operator(token: str | None) -> bool:
    return token is not None and token in OPERATORS


def snippet(text: str, index: int, radius: int = SNIPPET_RADIUS) -> str:
    """Return the window of ``text`` within ``radius`` characters of ``index``."""
    return text[max(0, index - radius) : index + radius + 1]


def normalize_text(text: str) -> str:
    # Collapse whitespace.
    return re.sub(r"\s+", " ", text).strip()


def tokenize(text: str) -> list[str]:
    """Split a dice expression into number, dice, operator and delimiter tokens.

    Raises DiceSyntaxError on malformed input. An empty or blank input
    yields an empty list; rejecting that is the caller's job.
    """

    s = normalize_text(text)
    tokens: list[str] = []
    current = ""
    has_decimal = False

    for i, c in enumerate(s):
        prev_c = s[i - 1] if i > 0 else ""
        next_c = s[i + 1] if i + 1 < len(s) else ""
        last_token = tokens[-1] if tokens else None

        if _is_word(c):
            current += c
            continue

        if (
            c == "-"
            and not current
            and (last_token is None or last_token in (SEPARATOR, GROUP_START) or _is_operator(last_token))
            and _is_digit(next_c)
        ):
            # Unary minus on a numeric primitive, e.g. "2 * -4".
            current += c
            continue

        if c == ".":
            if has_decimal:
                raise DiceSyntaxError(
                    f"[INVALID_DECIMAL] Second '.' in number '{current}{c}'.", snippet(s, i)
                )
            current += c
            has_decimal = True
            continue

        if c == " ":
            if _is_word(prev_c) and _is_word(next_c):
                raise DiceSyntaxError(
                    f"[EXTRANEOUS_SPACE] Space between '{prev_c}' and '{next_c}'; join them or add an operator.",
                    snippet(s, i),
                )
            if current:
                tokens.append(current)
            current = ""
            has_decimal = False
            continue

        if _is_operator(c) or c in _DELIMITERS:
            if _is_operator(c) and not current and _is_operator(last_token):
                raise DiceSyntaxError(
                    f"[CONSECUTIVE_OPERATORS] Operator '{c}' follows '{last_token}'.", snippet(s, i)
                )
            if current:
                tokens.append(current)
            tokens.append(c)
            current = ""
            has_decimal = False
            continue

        raise DiceSyntaxError(f"[INVALID_CHARACTER] Invalid character '{c}'.", snippet(s, i))

    if current:
        tokens.append(current)
    return tokens
