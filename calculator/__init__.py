"""String Calculator: evaluates arithmetic expressions given as text."""

from .MathEngine import calculate, detect_separator, preprocess, evaluate, format_number
from .error import MathError, InvalidExpression, DivisionByZero

__all__ = [
    "calculate",
    "detect_separator",
    "preprocess",
    "evaluate",
    "format_number",
    "MathError",
    "InvalidExpression",
    "DivisionByZero",
]
