"""Exports for scientific calculator core."""

from .accumulator import (
    EMPTY,
    ERROR_DISPLAY,
    AngleMode,
    CalculatorState,
    append,
    backspace,
    clear,
    evaluate,
    format_number,
    toggle_angle_mode,
    trig_scope,
)
from .actions import (
    BUTTONS,
    KEY_BINDINGS,
    Action,
    Button,
    Event,
    KeyBinding,
    binding_for_key,
    button_event,
    layout,
    reduce,
)
from .parser import DEFAULT_MAX_LENGTH, ExpressionError
from .session import Calculator, KeySource

__all__ = [
    "EMPTY",
    "ERROR_DISPLAY",
    "AngleMode",
    "CalculatorState",
    "append",
    "backspace",
    "clear",
    "evaluate",
    "format_number",
    "toggle_angle_mode",
    "trig_scope",
    "BUTTONS",
    "KEY_BINDINGS",
    "Action",
    "Button",
    "Event",
    "KeyBinding",
    "binding_for_key",
    "button_event",
    "layout",
    "reduce",
    "DEFAULT_MAX_LENGTH",
    "ExpressionError",
    "Calculator",
    "KeySource",
]
