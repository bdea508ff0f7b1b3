"""
The arithmetic rewrite passes and the standard pipeline built from them.
"""

from typing import List, Optional, Sequence, Union

from rwcalc.rwcalc_datatypes import (
    Token, Char, Numeral, Number,
    MalformedExpression, UnknownVariable, UnbalancedParens, DivisionByZero,
    is_digit_token, is_identifier_token, token_name,
)
from rwcalc.rwcalc_matcher import window_pass, anything, is_char
from rwcalc.rwcalc_pipeline import Pass, RecursivePass, Pipeline, PassObserver, rewrite_pass

LPAREN = Char('(')
RPAREN = Char(')')
MINUS = Char('-')


# ===================================================================
# Numerals
# ===================================================================

@rewrite_pass('merge-digits')
def merge_digits(tokens: Sequence[Token]) -> List[Token]:
    out: List[Token] = []
    for tok in tokens:
        out.append(tok)
        if len(out) < 2:
            continue
        right = out.pop()
        left = out.pop()
        if is_digit_token(left) and is_digit_token(right):
            out.append(Numeral(left.text + right.text))
        else:
            out.extend((left, right))
    return out


@rewrite_pass('convert-numerals')
def convert_numerals(tokens: Sequence[Token]) -> List[Token]:
    return [Number(int(tok.text)) if is_digit_token(tok) else tok for tok in tokens]


# ===================================================================
# Brackets
# ===================================================================

class BracketPass(RecursivePass):
    """Evaluates each parenthesized group with the pipeline this pass belongs to.

    Groups close innermost first: on `)` the buffer is popped back to the
    nearest `(`, and the pipeline's result replaces the whole group.
    """
    def __init__(self, name: str = 'brackets', traceable: bool = True):
        super().__init__(name, traceable)

    def rewrite(self, tokens: Sequence[Token], observer: Optional[PassObserver] = None) -> List[Token]:
        out: List[Token] = []
        for tok in tokens:
            if tok != RPAREN:
                out.append(tok)
                continue
            group: List[Token] = []
            while True:
                if not out:
                    raise UnbalancedParens("unmatched ')'", tok)
                popped = out.pop()
                if popped == LPAREN:
                    break
                group.append(popped)
            group.reverse()
            out.extend(self.recurse(group, observer))
        return out


# ===================================================================
# Unary minus
# ===================================================================

@rewrite_pass('unary-minus')
def negate_unary_minus(tokens: Sequence[Token]) -> List[Token]:
    tokens = list(tokens)
    out: List[Token] = []
    i = 0
    while i < len(tokens):
        tok = tokens[i]
        prev_is_number = i > 0 and isinstance(tokens[i - 1], Number)
        nxt = tokens[i + 1] if i + 1 < len(tokens) else None
        if tok == MINUS and not prev_is_number and isinstance(nxt, Number):
            out.append(Number(-nxt.value))
            i += 2
            continue
        out.append(tok)
        i += 1
    return out


# ===================================================================
# Folds
# ===================================================================

def _operand(tok: Token) -> Union[int, float]:
    match tok:
        case Number(value=value):
            return value
    if tok == LPAREN:
        raise UnbalancedParens("unmatched '('", tok)
    if is_identifier_token(tok):
        raise UnknownVariable(token_name(tok), tok)
    raise MalformedExpression(f"expected a number, got {tok.text!r}", tok)


def _divide(left, right, op_tok: Token):
    if right == 0:
        raise DivisionByZero("division by zero", op_tok)
    # Exact integer quotients stay integers.
    if isinstance(left, int) and isinstance(right, int) and left % right == 0:
        return left // right
    return left / right


def _fold_multiplicative(window: List[Token]) -> List[Token]:
    left_tok, op, right_tok = window
    left, right = _operand(left_tok), _operand(right_tok)
    if op.c == '*':
        return [Number(left * right)]
    return [Number(_divide(left, right, op))]


def _fold_additive(window: List[Token]) -> List[Token]:
    left_tok, op, right_tok = window
    left, right = _operand(left_tok), _operand(right_tok)
    if op.c == '+':
        return [Number(left + right)]
    return [Number(left - right)]


fold_multiplicative = Pass('fold-multiplicative', window_pass([anything, is_char('*', '/'), anything], _fold_multiplicative))
fold_additive = Pass('fold-additive', window_pass([anything, is_char('+', '-'), anything], _fold_additive))


def standard_pipeline() -> Pipeline:
    """The arithmetic chain: numerals, brackets, unary minus, then `*/` before `+-`."""
    pipeline = Pipeline()
    for p in (merge_digits, convert_numerals, BracketPass(), negate_unary_minus,
              fold_multiplicative, fold_additive):
        pipeline = pipeline.insert_end(p)
    return pipeline
