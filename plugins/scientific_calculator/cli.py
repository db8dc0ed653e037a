"""Command line interface for the Scientific Calculator plugin."""

from __future__ import annotations

import argparse
import sys
from typing import Iterable, TextIO

from .core import (
    DEFAULT_MAX_LENGTH,
    Action,
    AngleMode,
    Calculator,
    CalculatorState,
    Event,
    KeySource,
    binding_for_key,
    button_event,
)

_KEY_NAMES = {"enter": "Enter", "backspace": "Backspace", "escape": "Escape", "esc": "Escape"}
_QUIT = {"quit", "exit", "q"}


def _deliver(line: str, calculator: Calculator, source: KeySource) -> None:
    """Treat ``line`` as a button name, a named key, or a run of key presses."""

    if button_event(line) is not None:
        calculator.press_button(line)
        return
    named = _KEY_NAMES.get(line.lower())
    if named:
        source.press(named)
        return
    for char in line:
        if binding_for_key(char) is not None:
            source.press(char)
        elif button_event(char) is not None:
            calculator.press_button(char)


def run_session(
    lines: Iterable[str],
    calculator: Calculator,
    *,
    out: TextIO | None = None,
) -> Calculator:
    out = out or sys.stdout
    source = KeySource()
    with calculator.attached(source):
        for raw in lines:
            line = raw.strip()
            if line.lower() in _QUIT:
                break
            if line:
                _deliver(line, calculator, source)
            out.write(f"[{calculator.angle_mode.value}] {calculator.display}\n")
            out.flush()
    return calculator


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Scientific calculator")
    parser.add_argument(
        "--angle",
        choices=["rad", "deg"],
        default="rad",
        help="Angle mode for sin, cos and tan",
    )
    parser.add_argument(
        "--expression",
        "-e",
        help="Evaluate one expression, print the display and exit",
    )
    parser.add_argument(
        "--max-length",
        type=int,
        default=DEFAULT_MAX_LENGTH,
        help="Longest expression accepted by the parser",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    mode = AngleMode.DEGREES if args.angle == "deg" else AngleMode.RADIANS
    calculator = Calculator(CalculatorState(angle_mode=mode), max_length=args.max_length)

    if args.expression is not None:
        if args.expression.strip():
            calculator.dispatch(Event(Action.APPEND, args.expression.strip()))
        calculator.dispatch(Event(Action.EVALUATE))
        print(calculator.display)
        return 1 if calculator.state.error else 0

    print("Type digits and operators, button names (sin, ln, C, CE, RAD, =) or 'quit'.")
    run_session(sys.stdin, calculator)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
