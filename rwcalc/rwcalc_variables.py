"""
The `set(name,value)` extension.

Three passes are inserted at the front of an existing pipeline. Each front
insert runs before the previous ones, so they are inserted in reverse:
substitution first, then assignment, then the keyword pass. At run time
the keyword pass runs first and substitution last, which lets
`set(x,...)` see the previous value of `x` on its own right-hand side.
"""

from typing import List

from rwcalc.rwcalc_datatypes import (
    Token, Char, Symbol, Environment, ANY, MalformedExpression,
    is_identifier_token, token_name,
)
from rwcalc.rwcalc_matcher import token_pass
from rwcalc.rwcalc_pipeline import Pass, Pipeline

SET_KEYWORD = Symbol('set')


def set_word_pass() -> Pass:
    """Collapses the characters `s e t` into the `set` keyword symbol."""
    literals = [Char(c) for c in SET_KEYWORD.name]
    return Pass('set-word', token_pass(literals, lambda _matched: [SET_KEYWORD]))


def set_variable_pass(environment: Environment) -> Pass:
    """Binds `set ( name , value )` in `environment` and leaves `value` in its place."""
    def assign(matched: List[Token]) -> List[Token]:
        _set, _open, name, _comma, value, _close = matched
        if not is_identifier_token(name):
            raise MalformedExpression(f"cannot assign to {name.text!r}", name)
        # an already bound value name resolves to its binding before this assignment
        if is_identifier_token(value) and value in environment:
            value = environment[value]
        environment[token_name(name)] = value
        return [value]

    pattern = [SET_KEYWORD, Char('('), ANY, Char(','), ANY, Char(')')]
    return Pass('set-variable', token_pass(pattern, assign))


def use_variable_pass(environment: Environment) -> Pass:
    """Replaces every bound identifier with the token stored for it."""
    def substitute(tokens):
        return [
            environment[tok] if is_identifier_token(tok) and tok in environment else tok
            for tok in tokens
        ]
    return Pass('use-variable', substitute)


def with_variables(pipeline: Pipeline, environment: Environment) -> Pipeline:
    pipeline = pipeline.insert_front(use_variable_pass(environment))
    pipeline = pipeline.insert_front(set_variable_pass(environment))
    return pipeline.insert_front(set_word_pass())
