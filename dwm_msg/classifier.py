"""Classification of command arguments into JSON value types.

``run_command`` arguments arrive as strings. Tokens that look like numbers
are sent as JSON numbers so dwm receives e.g. ``1`` rather than ``"1"``.

Rules, checked in order:

1. Signed integer: only ASCII digits, plus an optional ``-`` at position 0.
2. Float: only ASCII digits, plus at most one ``.`` that is neither the
   first nor the last character, plus an optional ``-`` at position 0.
3. Anything else is a string.

No locale, no exponents, no leading ``+``. The empty token is a string.
A bare ``-`` satisfies rule 1 and converts to ``0``. Integers saturate to
the signed 64-bit range and floats too large for a double saturate to
``±sys.float_info.max``, so every value stays a finite JSON number.
"""

import math
import sys
from enum import Enum
from typing import Union

from .logging_config import get_logger


logger = get_logger('classifier')

DIGITS = frozenset("0123456789")

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

ArgumentValue = Union[int, float, str]


class ArgumentKind(Enum):
    """JSON type an argument is transmitted as."""
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"


def is_signed_int(token: str) -> bool:
    """Digits with an optional leading minus sign."""
    if not token:
        return False
    return all(c in DIGITS or (i == 0 and c == "-") for i, c in enumerate(token))


def is_float(token: str) -> bool:
    """Digits with at most one inner dot and an optional leading minus sign."""
    if not token:
        return False
    last = len(token) - 1
    dot_used = False
    for i, c in enumerate(token):
        if c in DIGITS:
            continue
        if c == "." and not dot_used and 0 < i < last:
            dot_used = True
            continue
        if c == "-" and i == 0:
            continue
        return False
    return True


def is_unsigned_int(token: str) -> bool:
    """Non-empty and made of ASCII digits only."""
    return bool(token) and all(c in DIGITS for c in token)


def classify(token: str) -> ArgumentKind:
    """Decide which JSON type ``token`` is sent as."""
    if is_signed_int(token):
        return ArgumentKind.INTEGER
    if is_float(token):
        return ArgumentKind.FLOAT
    return ArgumentKind.STRING


def saturating_int(token: str) -> int:
    """Parse a signed decimal token, clamped to the signed 64-bit range like strtoll."""
    negative = token.startswith("-")
    digits = token.lstrip("-").lstrip("0")
    # int() refuses very long digit strings; anything past 19 digits is out of range anyway
    if len(digits) > 19:
        return INT64_MIN if negative else INT64_MAX
    return max(INT64_MIN, min(INT64_MAX, int(token)))


def _to_int(token: str) -> int:
    if token == "-":
        logger.debug("Bare '-' argument sent as integer 0")
        return 0
    return saturating_int(token)


def _to_float(token: str) -> float:
    value = float(token)
    if math.isinf(value):
        logger.debug(f"Float argument {token[:20]}... out of range, saturated")
        return math.copysign(sys.float_info.max, value)
    return value


def convert(token: str) -> ArgumentValue:
    """Return ``token`` as the Python value matching its classification.

    Examples:
        >>> convert("-123")
        -123
        >>> convert("1.5")
        1.5
        >>> convert(".5")
        '.5'
    """
    kind = classify(token)
    if kind is ArgumentKind.INTEGER:
        return _to_int(token)
    if kind is ArgumentKind.FLOAT:
        return _to_float(token)
    return token
