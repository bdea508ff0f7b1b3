import pytest

from rwcalc.rwcalc_datatypes import (
    Char, Numeral, Number, Symbol,
    UnbalancedParens, UnknownVariable, MalformedExpression, DivisionByZero,
)
from rwcalc.rwcalc_passes import (
    merge_digits, convert_numerals, negate_unary_minus, fold_multiplicative, fold_additive,
    BracketPass, standard_pipeline,
)
from rwcalc.rwcalc_pipeline import Pipeline
from rwcalc.rwcalc_runtime import tokenize


def chars(s):
    return [Char(c) for c in s]


def run(source):
    return standard_pipeline().run(tokenize(source))


@pytest.mark.parametrize("digits", ["0", "7", "42", "123", "9081726354", "007"])
def test_digit_runs_convert_to_their_value(digits):
    assert convert_numerals(merge_digits(chars(digits))) == [Number(int(digits))]


def test_merge_digits_keeps_other_tokens():
    assert merge_digits(chars("12+345")) == [Numeral('12'), Char('+'), Numeral('345')]
    assert merge_digits(chars("a1")) == [Char('a'), Char('1')]


def test_convert_numerals_passes_non_numbers_through():
    tokens = [Numeral('12'), Char('*'), Char('3'), Symbol('set')]
    assert convert_numerals(tokens) == [Number(12), Char('*'), Number(3), Symbol('set')]


def test_standard_pipeline_order():
    assert standard_pipeline().names() == [
        'merge-digits', 'convert-numerals', 'brackets', 'unary-minus',
        'fold-multiplicative', 'fold-additive',
    ]


def test_bracket_pass_recurses_with_its_pipeline():
    p = Pipeline([BracketPass()])
    tokens = chars("a(b(c)d)e")
    # identity recursion just strips the parentheses
    assert p.run(tokens) == chars("abcde")


def test_bracket_pass_unmatched_close_raises():
    p = Pipeline([BracketPass()])
    with pytest.raises(UnbalancedParens) as exc:
        p.run(tokenize("1)"))
    assert exc.value.token.pos == 1


def test_unary_minus_at_start_and_after_operator():
    tokens = [Char('-'), Number(3), Char('*'), Char('-'), Number(2)]
    assert negate_unary_minus(tokens) == [Number(-3), Char('*'), Number(-2)]


def test_minus_between_numbers_is_left_alone():
    tokens = [Number(3), Char('-'), Number(2)]
    assert negate_unary_minus(tokens) == tokens


def test_minus_before_non_number_is_left_alone():
    tokens = [Char('-'), Char('(')]
    assert negate_unary_minus(tokens) == tokens


def test_folds_reduce_triples():
    assert fold_multiplicative([Number(6), Char('*'), Number(7)]) == [Number(42)]
    assert fold_multiplicative([Number(7), Char('/'), Number(2)]) == [Number(3.5)]
    assert fold_additive([Number(6), Char('-'), Number(7)]) == [Number(-1)]
    assert fold_additive([Number(6), Char('+'), Number(7)]) == [Number(13)]


def test_exact_division_stays_integral():
    [result] = fold_multiplicative([Number(6), Char('/'), Number(-2)])
    assert result.value == -3
    assert isinstance(result.value, int)


def test_division_by_zero():
    with pytest.raises(DivisionByZero):
        fold_multiplicative([Number(1), Char('/'), Number(0)])


def test_fold_reports_identifier_operand_as_unknown_variable():
    with pytest.raises(UnknownVariable) as exc:
        fold_additive([Char('y'), Char('+'), Number(1)])
    assert exc.value.name == 'y'


def test_fold_reports_operator_operand_as_malformed():
    with pytest.raises(MalformedExpression):
        run("2+*3")


@pytest.mark.parametrize("source, expected", [
    ("(3+(2*3)/(1-3))", 0),
    ("-12-34+56*78/90", -12 - 34 + 56 * 78 / 90),
    ("12-34+56*78/90", 12 - 34 + 56 * 78 / 90),
    ("12-34+56", 34),
    ("56*78/90", (56 * 78) / 90),
    ("1-2-3", -4),
    ("100/10/5", 2),
    ("2*3+4*5", 26),
    ("2+3*4-5", 9),
    ("8/4*2", 4),
    ("-3*-3", 9),
    ("2--3", 5),
    ("-(2+3)", -5),
    ("((((7))))", 7),
])
def test_standard_evaluation(source, expected):
    assert run(source) == [Number(expected)]


@pytest.mark.parametrize("plain, wrapped", [
    ("1+2*3", "1+(2*3)"),
    ("1+2*3", "(1+2*3)"),
    ("10-4-3", "((10-4))-3"),
    ("6/3*2", "(6/3)*2"),
])
def test_extra_parentheses_do_not_change_value(plain, wrapped):
    assert run(plain) == run(wrapped)


def test_passes_do_not_mutate_their_input():
    tokens = tokenize("(1+2)*3")
    snapshot = list(tokens)
    standard_pipeline().run(tokens)
    assert tokens == snapshot


def test_leftover_open_paren_reaching_a_fold():
    with pytest.raises(UnbalancedParens) as exc:
        run("(+2")
    assert exc.value.token.pos == 0
