"""Mutable calculator holder and scoped keyboard listener registration."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Iterator

from .accumulator import EMPTY, AngleMode, CalculatorState
from .actions import Event, binding_for_key, button_event, reduce
from .parser import DEFAULT_MAX_LENGTH

KeyHandler = Callable[[str], bool]


class KeySource:
    """Delivers key names to registered handlers.

    Handlers return ``True`` when they consumed the key, which marks its
    default behaviour as suppressed for the caller.
    """

    def __init__(self) -> None:
        self._handlers: list[KeyHandler] = []

    @property
    def listener_count(self) -> int:
        return len(self._handlers)

    def add_listener(self, handler: KeyHandler) -> None:
        self._handlers.append(handler)

    def remove_listener(self, handler: KeyHandler) -> None:
        try:
            self._handlers.remove(handler)
        except ValueError:
            pass

    @contextmanager
    def listen(self, handler: KeyHandler) -> Iterator[KeyHandler]:
        """Register ``handler`` for the duration of the block."""

        self.add_listener(handler)
        try:
            yield handler
        finally:
            self.remove_listener(handler)

    def press(self, key: str) -> bool:
        prevented = False
        for handler in list(self._handlers):
            prevented = handler(key) or prevented
        return prevented


class Calculator:
    """Holds the state of one calculator view and applies events to it."""

    def __init__(
        self,
        state: CalculatorState = EMPTY,
        *,
        max_length: int = DEFAULT_MAX_LENGTH,
    ) -> None:
        self.state = state
        self.max_length = max_length

    @property
    def display(self) -> str:
        return self.state.display

    @property
    def angle_mode(self) -> AngleMode:
        return self.state.angle_mode

    def dispatch(self, event: Event) -> CalculatorState:
        self.state = reduce(self.state, event, max_length=self.max_length)
        return self.state

    def press_button(self, name: str) -> bool:
        event = button_event(name)
        if event is None:
            return False
        self.dispatch(event)
        return True

    def handle_key(self, key: str) -> bool:
        """Key listener; returns ``True`` when the key's default is suppressed."""

        binding = binding_for_key(key)
        if binding is None:
            return False
        self.dispatch(binding.event)
        return binding.prevent_default

    @contextmanager
    def attached(self, source: KeySource) -> Iterator["Calculator"]:
        """Listen to ``source`` while the view is active."""

        with source.listen(self.handle_key):
            yield self


__all__ = ["Calculator", "KeyHandler", "KeySource"]
