"""Safe arithmetic expression parser used by the calculator."""

from __future__ import annotations

import ast
import math
import re
from typing import Callable, Mapping

Number = float | int
Scope = Mapping[str, "Callable[..., Number] | Number"]


class ExpressionError(ValueError):
    """Raised when an expression cannot be parsed or evaluated."""


DEFAULT_MAX_LENGTH = 1024

_BINARY_OPERATORS: dict[type, Callable[[Number, Number], Number]] = {
    ast.Add: lambda left, right: left + right,
    ast.Sub: lambda left, right: left - right,
    ast.Mult: lambda left, right: left * right,
    ast.Div: lambda left, right: left / right,
    ast.Mod: lambda left, right: left % right,
    ast.Pow: lambda left, right: float(left) ** float(right),
}

# Number or closing paren directly followed by "(", a digit or a name.
_IMPLICIT_MULTIPLICATION = (
    (re.compile(r"\)\s*(?=[(\w.])"), ")*"),
    (re.compile(r"(?<![\w.])((?:\d+\.?\d*|\.\d+)(?:[eE][+\-]?\d+)?)\s*(?=[(A-Za-z])(?![eE][+\-]?\d)"), r"\1*"),
)


def _log(value: Number, base: Number | None = None) -> float:
    if base is None:
        return math.log(value)
    return math.log(value, base)


BUILTINS: dict[str, Callable[..., Number] | Number] = {
    "sin": math.sin,
    "cos": math.cos,
    "tan": math.tan,
    "asin": math.asin,
    "acos": math.acos,
    "atan": math.atan,
    "sinh": math.sinh,
    "cosh": math.cosh,
    "tanh": math.tanh,
    "exp": math.exp,
    "sqrt": math.sqrt,
    "abs": abs,
    "log": _log,
    "log10": math.log10,
    "log2": math.log2,
    "floor": math.floor,
    "ceil": math.ceil,
    "round": round,
    "pi": math.pi,
    "e": math.e,
    "tau": math.tau,
}


def _normalize_expression(expression: str, max_length: int) -> str:
    if not expression or not isinstance(expression, str):
        raise ExpressionError("Expression is required")
    expression = expression.strip()
    if len(expression) > max_length:
        raise ExpressionError("Expression is too long")
    if "**" in expression:
        raise ExpressionError("Operator not permitted: **")
    # Caret is exponentiation, as on a calculator keypad.
    expression = expression.replace("^", "**")
    for pattern, replacement in _IMPLICIT_MULTIPLICATION:
        expression = pattern.sub(replacement, expression)
    return expression


def _validate_ast(node: ast.AST) -> None:
    if isinstance(node, ast.Expression):
        _validate_ast(node.body)
        return
    if isinstance(node, ast.BinOp):
        if type(node.op) not in _BINARY_OPERATORS:
            raise ExpressionError("Operator not permitted")
        _validate_ast(node.left)
        _validate_ast(node.right)
        return
    if isinstance(node, ast.UnaryOp):
        if not isinstance(node.op, (ast.UAdd, ast.USub)):
            raise ExpressionError("Unary operator not permitted")
        _validate_ast(node.operand)
        return
    if isinstance(node, ast.Call):
        if not isinstance(node.func, ast.Name):
            raise ExpressionError("Only named functions are permitted")
        if node.keywords:
            raise ExpressionError("Keyword arguments are not supported")
        for arg in node.args:
            _validate_ast(arg)
        return
    if isinstance(node, ast.Name):
        if node.id.startswith("__"):
            raise ExpressionError("Names starting with __ are not allowed")
        return
    if isinstance(node, ast.Constant):
        if isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
            raise ExpressionError("Only numeric literals are allowed")
        return
    raise ExpressionError("Unsupported syntax")


def _eval_node(node: ast.AST, names: Scope) -> Number:
    if isinstance(node, ast.Constant):
        try:
            return float(node.value)
        except OverflowError:
            return math.inf
    if isinstance(node, ast.Name):
        value = names.get(node.id)
        if value is None:
            raise ExpressionError(f"Unknown symbol '{node.id}'")
        if callable(value):
            raise ExpressionError(f"'{node.id}' is a function")
        return value
    if isinstance(node, ast.UnaryOp):
        operand = _eval_node(node.operand, names)
        return +operand if isinstance(node.op, ast.UAdd) else -operand
    if isinstance(node, ast.BinOp):
        left = _eval_node(node.left, names)
        right = _eval_node(node.right, names)
        try:
            value = _BINARY_OPERATORS[type(node.op)](left, right)
        except ZeroDivisionError:
            # Division by zero yields a non-finite value, not a parse failure.
            if isinstance(node.op, ast.Div) and left != 0:
                return math.copysign(math.inf, left) * math.copysign(1.0, right)
            return math.nan
        except OverflowError:
            return math.inf
        if isinstance(value, complex):
            raise ExpressionError("Complex results are not supported")
        return value
    if isinstance(node, ast.Call):
        func_name = node.func.id  # type: ignore[attr-defined]
        func = names.get(func_name)
        if func is None:
            raise ExpressionError(f"Unknown function '{func_name}'")
        if not callable(func):
            raise ExpressionError(f"'{func_name}' is not a function")
        args = [_eval_node(arg, names) for arg in node.args]
        try:
            return func(*args)
        except TypeError as exc:
            raise ExpressionError(f"Wrong number of arguments for '{func_name}'") from exc
        except (ValueError, OverflowError) as exc:
            raise ExpressionError(f"Math error in '{func_name}': {exc}") from exc
    raise ExpressionError("Unsupported syntax")  # pragma: no cover - guarded by _validate_ast


def evaluate(
    expression: str,
    scope: Scope | None = None,
    *,
    max_length: int = DEFAULT_MAX_LENGTH,
) -> float:
    """Evaluate ``expression`` and return its numeric value.

    ``scope`` maps names to functions or numbers and takes precedence over the
    built-in names. Any syntax error, unknown symbol or math-domain failure is
    raised as :class:`ExpressionError`. Division by zero is not an error here:
    it produces an infinite or NaN result which callers may reject.
    """

    normalized = _normalize_expression(expression, max_length)
    try:
        parsed = ast.parse(normalized, mode="eval")
    except SyntaxError as exc:
        raise ExpressionError(f"Could not parse expression: {exc.msg}") from exc
    _validate_ast(parsed)

    names = {**BUILTINS, **(scope or {})}
    value = _eval_node(parsed.body, names)

    if isinstance(value, complex):
        raise ExpressionError("Complex results are not supported")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ExpressionError("Expression returned a non-numeric value")
    return float(value)


__all__ = ["BUILTINS", "DEFAULT_MAX_LENGTH", "ExpressionError", "evaluate"]
