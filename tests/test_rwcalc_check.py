import pytest

from rwcalc.rwcalc_check import SCENARIOS, VARIABLE_SCENARIOS, CheckReport, run_check
from rwcalc.rwcalc_datatypes import Number
from rwcalc.rwcalc_runtime import ExpressionRunner


@pytest.mark.parametrize("expression, expected", SCENARIOS)
def test_builtin_scenarios_are_correct(expression, expected):
    report = run_check(ExpressionRunner(), expression, expected)
    assert isinstance(report, CheckReport)
    assert report.correct, report


def test_variable_scenarios_share_a_runner():
    runner = ExpressionRunner()
    reports = [run_check(runner, e, x) for e, x in VARIABLE_SCENARIOS]
    assert all(r.correct for r in reports)
    assert reports[-1].result == [Number(0)]


def test_wrong_answer_is_reported():
    report = run_check(ExpressionRunner(), "2+2", 5)
    assert report.correct is False
    assert report.result == [Number(4)]


def test_non_number_first_token_is_incorrect():
    report = run_check(ExpressionRunner(), "(1", 1)
    assert report.correct is False
