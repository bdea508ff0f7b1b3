import pytest

from rwcalc.rwcalc_datatypes import Char, Number, Symbol, Environment, MalformedExpression, UnknownVariable
from rwcalc.rwcalc_variables import set_word_pass, set_variable_pass, use_variable_pass, with_variables
from rwcalc.rwcalc_passes import standard_pipeline
from rwcalc.rwcalc_runtime import tokenize, final_value


def chars(s):
    return [Char(c) for c in s]


@pytest.fixture
def env():
    return Environment()


@pytest.fixture
def pipeline(env):
    return with_variables(standard_pipeline(), env)


def test_variable_passes_run_before_the_arithmetic_chain(pipeline):
    assert pipeline.names()[:3] == ['set-word', 'set-variable', 'use-variable']
    assert pipeline.names()[3:] == standard_pipeline().names()


def test_set_word_collapses_keyword():
    assert set_word_pass()(chars("set(")) == [Symbol('set'), Char('(')]
    assert set_word_pass()(chars("se+t")) == chars("se+t")


def test_set_variable_binds_and_emits_value(env):
    tokens = [Symbol('set')] + chars("(x,3)")
    assert set_variable_pass(env)(tokens) == [Char('3')]
    assert env['x'] == Char('3')


def test_set_variable_requires_identifier_name(env):
    tokens = [Symbol('set')] + chars("(+,3)")
    with pytest.raises(MalformedExpression):
        set_variable_pass(env)(tokens)


def test_use_variable_substitutes_bound_names(env):
    env['x'] = Char('4')
    assert use_variable_pass(env)(chars("x+y")) == [Char('4'), Char('+'), Char('y')]


def test_set_then_use(env, pipeline):
    assert pipeline.run(tokenize("set(x,3)")) == [Number(3)]
    assert env['x'] == Char('3')
    assert pipeline.run(tokenize("(x+(2*x)/(1-x))")) == [Number(0)]


def test_set_inside_an_expression(env, pipeline):
    assert final_value(pipeline.run(tokenize("1+set(y,5)*2"))) == 11
    assert final_value(pipeline.run(tokenize("y*y"))) == 25


def test_assignment_sees_the_previous_value(env, pipeline):
    pipeline.run(tokenize("set(x,3)"))
    assert pipeline.run(tokenize("set(x,x)")) == [Number(3)]
    assert env['x'] == Char('3')
    assert final_value(pipeline.run(tokenize("x+1"))) == 4


def test_assignment_from_another_variable(env, pipeline):
    pipeline.run(tokenize("set(x,3)"))
    assert pipeline.run(tokenize("set(y,x)")) == [Number(3)]
    assert env['y'] == Char('3')
    assert final_value(pipeline.run(tokenize("y+1"))) == 4
    # rebinding x later leaves y alone
    pipeline.run(tokenize("set(x,7)"))
    assert final_value(pipeline.run(tokenize("y*x"))) == 21


def test_multi_digit_value_does_not_match(env, pipeline):
    result = pipeline.run(tokenize("set(x,12)"))
    assert 'x' not in env
    with pytest.raises(MalformedExpression):
        final_value(result)


def test_unbound_variable_reaching_a_fold(pipeline):
    with pytest.raises(UnknownVariable) as exc:
        pipeline.run(tokenize("z+1"))
    assert exc.value.name == 'z'


def test_assignment_from_unbound_name_keeps_the_name(env):
    tokens = [Symbol('set')] + chars("(y,q)")
    assert set_variable_pass(env)(tokens) == [Char('q')]
    assert env['y'] == Char('q')
