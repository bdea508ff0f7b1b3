"""
Fixed-width sliding-window scan-and-replace over token sequences.

Most rewrite passes are built from `window_pass`: a list of single-token
predicates and a combiner that turns a matched window into replacement
tokens.
"""

from typing import Callable, List, Sequence

from rwcalc.rwcalc_datatypes import Token, Char, Number, ANY

Predicate = Callable[[Token], bool]
Combiner = Callable[[List[Token]], List[Token]]


def anything(tok: Token) -> bool:
    return True


def is_number(tok: Token) -> bool:
    return isinstance(tok, Number)


def is_char(*chars: str) -> Predicate:
    """Predicate accepting a Char equal to any of `chars`."""
    wanted = frozenset(chars)
    def check(tok: Token) -> bool:
        return isinstance(tok, Char) and tok.c in wanted
    return check


def window_pass(predicates: Sequence[Predicate], combine: Combiner) -> Callable[[Sequence[Token]], List[Token]]:
    """
    Build a scan that replaces every matching window of `len(predicates)`
    tokens with `combine(window)`.

    Tokens are appended to an output buffer one at a time; after each append
    the most recent window is tested once. A replacement therefore only
    takes part in later matches together with tokens scanned after it.
    """
    predicates = list(predicates)
    width = len(predicates)

    def scan(tokens: Sequence[Token]) -> List[Token]:
        out: List[Token] = []
        if width == 0:
            return list(tokens)
        for tok in tokens:
            out.append(tok)
            if len(out) < width:
                continue
            window = out[-width:]
            if all(pred(t) for pred, t in zip(predicates, window)):
                del out[-width:]
                out.extend(combine(window))
        return out

    return scan


def _literal(expected) -> Predicate:
    if expected is ANY:
        return anything
    def check(tok: Token) -> bool:
        return tok == expected
    return check


def token_pass(literals: Sequence, combine: Combiner) -> Callable[[Sequence[Token]], List[Token]]:
    """Window scan where each position must equal a literal token, or be `ANY`."""
    return window_pass([_literal(t) for t in literals], combine)
