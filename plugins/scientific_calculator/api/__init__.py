"""Page and API routes for the Scientific Calculator plugin."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from flask import Blueprint, Response, current_app, render_template, request
from pydantic import ConfigDict, Field

from common.errors import ValidationAppError
from common.logging import get_logger
from common.responses import fail, ok
from common.validation import SchemaModel, ValidationError, parse_model

from ..core import (
    DEFAULT_MAX_LENGTH,
    EMPTY,
    Action,
    AngleMode,
    CalculatorState,
    Event,
    binding_for_key,
    button_event,
    layout,
    reduce,
)

logger = get_logger()

_UI_ROOT = Path(__file__).resolve().parent.parent / "ui"


class StatePayload(SchemaModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=False)

    text: str = ""
    error: bool = False
    angle_mode: Literal["RAD", "DEG"] = "RAD"

    def to_state(self) -> CalculatorState:
        return CalculatorState(
            text="" if self.error else self.text,
            error=self.error,
            angle_mode=AngleMode(self.angle_mode),
        )


class EventPayload(SchemaModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=False)

    action: Literal["append", "clear", "backspace", "evaluate", "toggle_angle"]
    token: str | None = None


class DispatchPayload(SchemaModel):
    state: StatePayload | None = None
    event: EventPayload | None = None
    key: str | None = None
    button: str | None = None


class EvaluatePayload(SchemaModel):
    expression: str = Field(min_length=1)
    angle_unit: Literal["radian", "degree"] = "radian"


bp = Blueprint(
    "scientific_calculator",
    __name__,
    url_prefix="/scientific_calculator",
    template_folder=str(_UI_ROOT / "templates"),
    static_folder=str(_UI_ROOT / "static"),
    static_url_path="/static",
)

api_bp = Blueprint("scientific_calculator_api", __name__, url_prefix="/api/scientific_calculator")


def _max_expression_length() -> int:
    settings = current_app.config.get("PLUGIN_SETTINGS", {}).get("scientific_calculator", {})
    try:
        return max(int(settings.get("max_expression_length", DEFAULT_MAX_LENGTH)), 1)
    except (TypeError, ValueError):
        return DEFAULT_MAX_LENGTH


def _invalid_request(exc: Exception) -> Response:
    return fail(
        ValidationAppError(
            message=str(exc),
            code="sci_calc.invalid_request",
            details=getattr(exc, "details", None),
        )
    )


def _state_response(state: CalculatorState, *, handled: bool, prevent_default: bool = False) -> Response:
    return ok(
        {
            "state": state.to_dict(),
            "display": state.display,
            "handled": handled,
            "prevent_default": prevent_default,
        }
    )


@bp.get("/")
def index() -> str:
    return render_template(
        "scientific_calculator/index.html",
        layout=layout(EMPTY),
        initial_state=EMPTY.to_dict(),
    )


@api_bp.get("/layout")
def keypad_layout() -> Response:
    return ok(layout(EMPTY))


@api_bp.post("/dispatch")
def dispatch() -> Response:
    raw_payload = request.get_json(silent=True) or {}
    try:
        payload = parse_model(DispatchPayload, raw_payload)
    except ValidationError as exc:
        return _invalid_request(exc)

    inputs = [item for item in (payload.event, payload.key, payload.button) if item is not None]
    if len(inputs) != 1:
        return fail(
            ValidationAppError(
                message="Provide exactly one of 'event', 'key' or 'button'",
                code="sci_calc.invalid_request",
            )
        )

    state = payload.state.to_state() if payload.state else EMPTY
    prevent_default = False
    if payload.event is not None:
        try:
            event = Event(Action(payload.event.action), payload.event.token)
        except ValueError as exc:
            return _invalid_request(exc)
    elif payload.key is not None:
        binding = binding_for_key(payload.key)
        if binding is None:
            return _state_response(state, handled=False)
        event, prevent_default = binding.event, binding.prevent_default
    else:
        event = button_event(payload.button or "")
        if event is None:
            return fail(
                ValidationAppError(
                    message=f"Unknown button '{payload.button}'",
                    code="sci_calc.unknown_button",
                )
            )

    next_state = reduce(state, event, max_length=_max_expression_length())
    if event.action is Action.EVALUATE and next_state.error and not state.error:
        logger.debug("evaluation failed", extra={"expression": state.text})
    return _state_response(next_state, handled=True, prevent_default=prevent_default)


@api_bp.post("/evaluate")
def evaluate() -> Response:
    raw_payload = request.get_json(silent=True) or {}
    try:
        payload = parse_model(EvaluatePayload, raw_payload)
    except ValidationError as exc:
        return _invalid_request(exc)

    mode = AngleMode.DEGREES if payload.angle_unit == "degree" else AngleMode.RADIANS
    state = CalculatorState(text=payload.expression, angle_mode=mode)
    result = reduce(state, Event(Action.EVALUATE), max_length=_max_expression_length())
    if result.error:
        logger.debug("evaluation failed", extra={"expression": payload.expression})
    return ok(
        {
            "display": result.display,
            "error": result.error,
            "result": None if result.error else float(result.text),
            "angle_unit": payload.angle_unit,
        }
    )


blueprints = [bp, api_bp]


__all__ = [
    "blueprints",
    "index",
    "keypad_layout",
    "dispatch",
    "evaluate",
]
