import io

import pytest

from plugins.scientific_calculator import cli
from plugins.scientific_calculator.core import AngleMode, Calculator


def _session(*lines: str, calculator: Calculator | None = None) -> tuple[Calculator, list[str]]:
    out = io.StringIO()
    calculator = cli.run_session(lines, calculator or Calculator(), out=out)
    return calculator, out.getvalue().splitlines()


def test_session_types_keys_and_evaluates():
    calculator, output = _session("7+8", "enter")
    assert calculator.display == "15"
    assert output == ["[RAD] 7+8", "[RAD] 15"]


def test_session_uses_buttons_and_angle_toggle():
    calculator, output = _session("RAD", "sin", "90)", "=")
    assert calculator.angle_mode is AngleMode.DEGREES
    assert float(calculator.display) == pytest.approx(1.0)
    assert output[0] == "[DEG] "
    assert output[2] == "[DEG] sin(90)"


def test_session_named_keys_and_quit():
    calculator, output = _session("12", "backspace", "esc", "3", "quit", "4")
    assert calculator.display == "3"
    assert output == ["[RAD] 12", "[RAD] 1", "[RAD] ", "[RAD] 3"]


def test_session_ignores_unbound_characters():
    calculator, _ = _session("2a^3", "=")
    assert calculator.display == "8"


def test_main_evaluates_expression(capsys):
    assert cli.main(["--angle", "deg", "--expression", "sin(90)"]) == 0
    assert capsys.readouterr().out.strip() == "1"


def test_main_reports_error(capsys):
    assert cli.main(["-e", "5/0"]) == 1
    assert capsys.readouterr().out.strip() == "Error"


def test_main_with_blank_expression(capsys):
    assert cli.main(["-e", "  "]) == 0
    assert capsys.readouterr().out == "\n"
