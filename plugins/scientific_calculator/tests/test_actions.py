import pytest

from plugins.scientific_calculator.core import (
    BUTTONS,
    EMPTY,
    Action,
    AngleMode,
    Calculator,
    CalculatorState,
    Event,
    KeySource,
    binding_for_key,
    button_event,
    layout,
    reduce,
)


def _run(state: CalculatorState, *events: Event) -> CalculatorState:
    for event in events:
        state = reduce(state, event)
    return state


def test_reduce_dispatches_each_action():
    state = _run(
        EMPTY,
        Event(Action.APPEND, "7"),
        Event(Action.APPEND, "+"),
        Event(Action.APPEND, "8"),
    )
    assert state.text == "7+8"
    assert reduce(state, Event(Action.EVALUATE)).text == "15"
    assert reduce(state, Event(Action.BACKSPACE)).text == "7+"
    assert reduce(state, Event(Action.CLEAR)) == EMPTY
    assert reduce(state, Event(Action.TOGGLE_ANGLE)).angle_mode is AngleMode.DEGREES


def test_append_event_requires_token():
    with pytest.raises(ValueError):
        Event(Action.APPEND)


@pytest.mark.parametrize(
    ("label", "token"),
    [
        ("sin", "sin("),
        ("cos", "cos("),
        ("tan", "tan("),
        ("log", "log10("),
        ("ln", "log("),
        ("√", "sqrt("),
        ("^", "^"),
        ("(", "("),
    ],
)
def test_function_buttons_append_prefixes(label, token):
    assert button_event(label) == Event(Action.APPEND, token)


def test_control_buttons():
    assert button_event("C") == Event(Action.CLEAR)
    assert button_event("CE") == Event(Action.BACKSPACE)
    assert button_event("=") == Event(Action.EVALUATE)
    assert button_event("angle") == Event(Action.TOGGLE_ANGLE)
    assert button_event("DEG") == Event(Action.TOGGLE_ANGLE)
    assert button_event("%") is None


def test_keypad_covers_digits_and_operators():
    keys = {button.key for button in BUTTONS}
    assert set("0123456789+-*/.()") <= keys
    assert len(keys) == len(BUTTONS)


def test_angle_button_label_tracks_mode():
    degrees = CalculatorState(angle_mode=AngleMode.DEGREES)
    labels = {item["key"]: item["label"] for item in layout(degrees)["buttons"]}
    assert labels["angle"] == "DEG"
    assert labels["sqrt"] == "√"


@pytest.mark.parametrize("key", list("0123456789+-*/."))
def test_character_keys_append(key):
    binding = binding_for_key(key)
    assert binding.event == Event(Action.APPEND, key)
    assert binding.prevent_default is False


def test_named_keys():
    assert binding_for_key("Enter").event.action is Action.EVALUATE
    assert binding_for_key("Enter").prevent_default is True
    assert binding_for_key("=").prevent_default is True
    assert binding_for_key("Backspace").event.action is Action.BACKSPACE
    assert binding_for_key("Escape").event.action is Action.CLEAR


@pytest.mark.parametrize("key", ["s", "(", "^", "r", "Tab"])
def test_keys_without_binding(key):
    assert binding_for_key(key) is None


def test_calculator_handles_keys_through_source():
    source = KeySource()
    calculator = Calculator()
    with calculator.attached(source):
        assert source.listener_count == 1
        for key in "12*3":
            source.press(key)
        assert calculator.display == "12*3"
        assert source.press("Enter") is True
        assert calculator.display == "36"
        assert source.press("x") is False
        assert source.press("Backspace") is False
        assert calculator.display == "3"
    assert source.listener_count == 0
    source.press("9")
    assert calculator.display == "3"


def test_listener_is_detached_when_view_fails():
    source = KeySource()
    calculator = Calculator()
    with pytest.raises(RuntimeError):
        with calculator.attached(source):
            raise RuntimeError("teardown")
    assert source.listener_count == 0


def test_calculator_buttons_and_error_recovery():
    calculator = Calculator()
    for name in ("5", "/", "0", "="):
        assert calculator.press_button(name) is True
    assert calculator.display == "Error"
    calculator.press_button("7")
    assert calculator.display == "7"
    assert calculator.press_button("unknown") is False


def test_calculator_degree_mode_via_toggle():
    calculator = Calculator()
    calculator.press_button("angle")
    assert calculator.angle_mode is AngleMode.DEGREES
    for name in ("sin", "9", "0", ")", "="):
        calculator.press_button(name)
    assert float(calculator.display) == pytest.approx(1.0)
