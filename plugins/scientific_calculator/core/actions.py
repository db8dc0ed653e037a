"""Input events, keypad layout and key bindings for the calculator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from . import accumulator
from .accumulator import AngleMode, CalculatorState
from .parser import DEFAULT_MAX_LENGTH


class Action(str, Enum):
    APPEND = "append"
    CLEAR = "clear"
    BACKSPACE = "backspace"
    EVALUATE = "evaluate"
    TOGGLE_ANGLE = "toggle_angle"


@dataclass(frozen=True, slots=True)
class Event:
    action: Action
    token: str | None = None

    def __post_init__(self) -> None:
        if self.action is Action.APPEND and not self.token:
            raise ValueError("append events require a non-empty token")

    def to_dict(self) -> dict[str, object]:
        return {"action": self.action.value, "token": self.token}


def reduce(
    state: CalculatorState,
    event: Event,
    *,
    max_length: int = DEFAULT_MAX_LENGTH,
) -> CalculatorState:
    """Apply ``event`` to ``state`` and return the next state."""

    if event.action is Action.APPEND:
        return accumulator.append(state, event.token or "")
    if event.action is Action.CLEAR:
        return accumulator.clear(state)
    if event.action is Action.BACKSPACE:
        return accumulator.backspace(state)
    if event.action is Action.EVALUATE:
        return accumulator.evaluate(state, max_length=max_length)
    return accumulator.toggle_angle_mode(state)


def _append(token: str) -> Event:
    return Event(Action.APPEND, token)


@dataclass(frozen=True, slots=True)
class Button:
    key: str
    label: str
    event: Event
    css_class: str = ""

    def display_label(self, state: CalculatorState) -> str:
        # The angle toggle shows the mode currently in effect.
        if self.event.action is Action.TOGGLE_ANGLE:
            return state.angle_mode.value
        return self.label

    def to_dict(self, state: CalculatorState | None = None) -> dict[str, object]:
        return {
            "key": self.key,
            "label": self.display_label(state or accumulator.EMPTY),
            "event": self.event.to_dict(),
            "css_class": self.css_class,
        }


FUNCTION_TOKENS: dict[str, str] = {
    "sin": "sin(",
    "cos": "cos(",
    "tan": "tan(",
    "log": "log10(",
    "ln": "log(",
    "√": "sqrt(",
}


def _function_button(label: str, key: str | None = None) -> Button:
    return Button(key or label, label, _append(FUNCTION_TOKENS[label]), "sci-operator")


BUTTONS: tuple[Button, ...] = (
    _function_button("sin"),
    _function_button("cos"),
    _function_button("tan"),
    _function_button("log"),
    _function_button("ln"),
    Button("(", "(", _append("("), "sci-operator"),
    Button(")", ")", _append(")"), "sci-operator"),
    _function_button("√", key="sqrt"),
    Button("pow", "^", _append("^"), "sci-operator"),
    Button("angle", AngleMode.RADIANS.value, Event(Action.TOGGLE_ANGLE), "sci-operator"),
    Button("7", "7", _append("7")),
    Button("8", "8", _append("8")),
    Button("9", "9", _append("9")),
    Button("C", "C", Event(Action.CLEAR), "operator"),
    Button("CE", "CE", Event(Action.BACKSPACE), "operator"),
    Button("4", "4", _append("4")),
    Button("5", "5", _append("5")),
    Button("6", "6", _append("6")),
    Button("*", "*", _append("*"), "operator"),
    Button("/", "/", _append("/"), "operator"),
    Button("1", "1", _append("1")),
    Button("2", "2", _append("2")),
    Button("3", "3", _append("3")),
    Button("+", "+", _append("+"), "operator"),
    Button("-", "-", _append("-"), "operator"),
    Button("0", "0", _append("0"), "span-two"),
    Button(".", ".", _append(".")),
    Button("=", "=", Event(Action.EVALUATE), "operator equals span-two"),
)

_BUTTONS_BY_KEY = {button.key: button for button in BUTTONS}
_BUTTONS_BY_LABEL = {button.label: button for button in BUTTONS}


def button_event(name: str) -> Event | None:
    """Return the event for a button, looked up by key or label."""

    button = _BUTTONS_BY_KEY.get(name) or _BUTTONS_BY_LABEL.get(name)
    if button is None and name in {mode.value for mode in AngleMode}:
        button = _BUTTONS_BY_KEY["angle"]
    return button.event if button else None


@dataclass(frozen=True, slots=True)
class KeyBinding:
    event: Event
    prevent_default: bool = False


KEY_BINDINGS: dict[str, KeyBinding] = {
    **{digit: KeyBinding(_append(digit)) for digit in "0123456789"},
    **{symbol: KeyBinding(_append(symbol)) for symbol in "+-*/."},
    "Enter": KeyBinding(Event(Action.EVALUATE), prevent_default=True),
    "=": KeyBinding(Event(Action.EVALUATE), prevent_default=True),
    "Backspace": KeyBinding(Event(Action.BACKSPACE)),
    "Escape": KeyBinding(Event(Action.CLEAR)),
}


def binding_for_key(key: str) -> KeyBinding | None:
    """Return the binding for a ``KeyboardEvent.key`` value, if any."""

    return KEY_BINDINGS.get(key)


def layout(state: CalculatorState | None = None) -> dict[str, object]:
    """Describe the keypad and key bindings for rendering clients."""

    return {
        "buttons": [button.to_dict(state) for button in BUTTONS],
        "keys": {
            key: {**binding.event.to_dict(), "prevent_default": binding.prevent_default}
            for key, binding in KEY_BINDINGS.items()
        },
    }


__all__ = [
    "Action",
    "BUTTONS",
    "Button",
    "Event",
    "FUNCTION_TOKENS",
    "KEY_BINDINGS",
    "KeyBinding",
    "binding_for_key",
    "button_event",
    "layout",
    "reduce",
]
