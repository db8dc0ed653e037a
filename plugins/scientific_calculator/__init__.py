"""Scientific Calculator plugin manifest."""

manifest = {
    "title": "Scientific Calculator",
    "summary": "Keypad calculator with trigonometric, logarithmic and power functions in radian or degree mode.",
    "category": "General Utilities",
    "blueprint": "scientific_calculator",
    "icon": "img/calculator_icon.svg",
}

__all__ = ["manifest"]
