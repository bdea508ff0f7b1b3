"""
Manual test driver: evaluate an expression and compare it with an answer
computed independently (by Python's own arithmetic).
"""
from dataclasses import dataclass
from typing import Any, List, Tuple, Union

from rwcalc.rwcalc_datatypes import Token, Number

# Each answer is the same expression written as Python arithmetic.
SCENARIOS: List[Tuple[str, Union[int, float]]] = [
    ("(3+(2*3)/(1-3))", 3 + (2 * 3) / (1 - 3)),
    ("-12-34+56*78/90", -12 - 34 + 56 * 78 / 90),
    ("12-34+56*78/90", 12 - 34 + 56 * 78 / 90),
    ("12-34+56", 12 - 34 + 56),
    ("56*78/90", 56 * 78 / 90),
]

# Run in order against one runner: the second line reads the binding made by the first.
VARIABLE_SCENARIOS: List[Tuple[str, Union[int, float]]] = [
    ("set(x,3)", 3),
    ("(x+(2*x)/(1-x))", 3 + (2 * 3) / (1 - 3)),
]


@dataclass
class CheckReport:
    expression: str
    expected: Any
    result: List[Token]
    correct: bool


def run_check(runner, expression: str, expected) -> CheckReport:
    """Evaluate `expression` with `runner` and compare the first result token with `expected`."""
    result = runner.evaluate(expression)
    first = result[0] if result else None
    correct = isinstance(first, Number) and first.value == expected
    return CheckReport(expression, expected, result, correct)
