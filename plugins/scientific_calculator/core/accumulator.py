"""Expression accumulation and evaluation for the calculator keypad.

Every operation is a pure function taking the current :class:`CalculatorState`
and returning the next one. :class:`~.session.Calculator` is the mutable holder
used by interactive front ends.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Callable

from .parser import DEFAULT_MAX_LENGTH, evaluate as parse_and_evaluate

ERROR_DISPLAY = "Error"
BINARY_OPERATORS = frozenset("+-*/")


class AngleMode(str, Enum):
    RADIANS = "RAD"
    DEGREES = "DEG"

    def toggled(self) -> "AngleMode":
        return AngleMode.DEGREES if self is AngleMode.RADIANS else AngleMode.RADIANS


@dataclass(frozen=True, slots=True)
class CalculatorState:
    """Current expression text, error flag and angle mode.

    ``error`` marks the Error state, which is kept apart from every expression
    text; ``text`` is always empty while it is set.
    """

    text: str = ""
    error: bool = False
    angle_mode: AngleMode = AngleMode.RADIANS

    @property
    def display(self) -> str:
        return ERROR_DISPLAY if self.error else self.text

    @property
    def is_empty(self) -> bool:
        return not self.error and not self.text

    def to_dict(self) -> dict[str, object]:
        return {"text": self.text, "error": self.error, "angle_mode": self.angle_mode.value}


EMPTY = CalculatorState()


def _trailing_segment(text: str) -> str:
    for index in range(len(text) - 1, -1, -1):
        if text[index] in BINARY_OPERATORS:
            return text[index + 1 :]
    return text


def append(state: CalculatorState, token: str) -> CalculatorState:
    """Append ``token`` to the expression.

    A pending error is discarded and the token starts a fresh expression. A
    second decimal point in the same number is ignored.
    """

    if not token:
        raise ValueError("token must be a non-empty string")
    if state.error:
        return replace(state, text=token, error=False)
    if token == "." and "." in _trailing_segment(state.text):
        return state
    return replace(state, text=state.text + token)


def clear(state: CalculatorState) -> CalculatorState:
    return replace(state, text="", error=False)


def backspace(state: CalculatorState) -> CalculatorState:
    if state.error:
        return clear(state)
    return replace(state, text=state.text[:-1])


def toggle_angle_mode(state: CalculatorState) -> CalculatorState:
    return replace(state, angle_mode=state.angle_mode.toggled())


def _angle_aware(fn: Callable[[float], float], mode: AngleMode) -> Callable[[float], float]:
    def wrapped(value: float) -> float:
        if mode is AngleMode.DEGREES:
            value = value * math.pi / 180
        return fn(value)

    return wrapped


def trig_scope(mode: AngleMode) -> dict[str, Callable[[float], float]]:
    """Return ``sin``/``cos``/``tan`` bound to ``mode``."""

    return {
        "sin": _angle_aware(math.sin, mode),
        "cos": _angle_aware(math.cos, mode),
        "tan": _angle_aware(math.tan, mode),
    }


def format_number(value: float) -> str:
    """Render ``value`` the way a browser's ``String(number)`` does.

    Shortest round-tripping digits, no trailing ``.0`` and exponent notation
    outside ``[1e-6, 1e21)``.
    """

    if value == 0:
        return "0"
    sign, digits, exponent = Decimal(repr(value)).normalize().as_tuple()
    coefficient = "".join(str(digit) for digit in digits)
    # Position of the decimal point relative to the first digit.
    point = len(coefficient) + exponent
    prefix = "-" if sign else ""

    if -6 < point <= 21:
        if point <= 0:
            return f"{prefix}0.{'0' * -point}{coefficient}"
        if point >= len(coefficient):
            return f"{prefix}{coefficient}{'0' * (point - len(coefficient))}"
        return f"{prefix}{coefficient[:point]}.{coefficient[point:]}"

    mantissa = coefficient[0]
    if len(coefficient) > 1:
        mantissa += "." + coefficient[1:]
    power = point - 1
    return f"{prefix}{mantissa}e{'+' if power > 0 else '-'}{abs(power)}"


Evaluator = Callable[..., float]


def evaluate(
    state: CalculatorState,
    *,
    evaluator: Evaluator = parse_and_evaluate,
    max_length: int = DEFAULT_MAX_LENGTH,
) -> CalculatorState:
    """Evaluate the expression, replacing it with the result or the Error state.

    Empty and Error states are returned unchanged. No exception escapes:
    a trailing operator, any parser failure and any non-finite result all
    become the Error state.
    """

    if state.is_empty or state.error:
        return state
    if state.text[-1] in BINARY_OPERATORS:
        return replace(state, text="", error=True)
    try:
        value = evaluator(state.text, trig_scope(state.angle_mode), max_length=max_length)
    except (ArithmeticError, ValueError, TypeError, RecursionError):
        return replace(state, text="", error=True)
    if not math.isfinite(value):
        return replace(state, text="", error=True)
    return replace(state, text=format_number(value))


__all__ = [
    "AngleMode",
    "BINARY_OPERATORS",
    "CalculatorState",
    "EMPTY",
    "ERROR_DISPLAY",
    "append",
    "backspace",
    "clear",
    "evaluate",
    "format_number",
    "toggle_angle_mode",
    "trig_scope",
]
