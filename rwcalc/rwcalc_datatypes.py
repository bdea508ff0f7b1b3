"""
Defines the core data types for the rwcalc rewrite engine.

This module provides the token variants that flow through the pipeline,
the variable environment consulted by the variable passes, and the error
taxonomy raised when an expression cannot be reduced.
"""

from abc import ABC, abstractmethod
from collections import UserDict
from typing import Any, Optional, Union

# =================================================================
# Errors
# =================================================================

class EvaluationError(Exception):
    """Base class for failures raised while rewriting an expression."""
    def __init__(self, message: str, token: Optional['Token'] = None):
        super().__init__(message)
        self.message = message
        self.token = token

    @property
    def kind(self) -> str:
        return type(self).__name__


class UnbalancedParens(EvaluationError):
    pass


class UnknownVariable(EvaluationError):
    def __init__(self, name: str, token: Optional['Token'] = None):
        super().__init__(f"'{name}' is not bound", token)
        self.name = name


class MalformedExpression(EvaluationError):
    pass


class DivisionByZero(EvaluationError):
    pass


# =================================================================
# Tokens
# =================================================================

class Token(ABC):
    """Abstract base class for every value that flows through a pass."""

    @property
    @abstractmethod
    def text(self) -> str:
        raise NotImplementedError


class Char(Token):
    """A single input character.

    `pos` is the offset of the character in the source string. It is only
    used for error reporting and does not take part in equality.
    """
    def __init__(self, c: str, pos: Optional[int] = None):
        if len(c) != 1:
            raise ValueError(f"Char holds exactly one character, got {c!r}")
        self.c = c
        self.pos = pos

    @property
    def text(self) -> str:
        return self.c

    def __repr__(self) -> str:
        return f"Char({self.c!r})"

    def __eq__(self, other):
        if not isinstance(other, Char):
            return NotImplemented
        return self.c == other.c

    def __hash__(self):
        return hash(('char', self.c))


class Numeral(Token):
    """A run of digit characters merged into one token, not yet converted."""
    def __init__(self, digits: str):
        self.digits = digits

    @property
    def text(self) -> str:
        return self.digits

    def __repr__(self) -> str:
        return f"Numeral({self.digits!r})"

    def __eq__(self, other):
        if not isinstance(other, Numeral):
            return NotImplemented
        return self.digits == other.digits

    def __hash__(self):
        return hash(('numeral', self.digits))


class Number(Token):
    """A numeric value produced by numeral conversion or by a fold."""
    def __init__(self, value: Union[int, float]):
        self.value = value

    @property
    def text(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f"Number({self.value!r})"

    def __eq__(self, other):
        if not isinstance(other, Number):
            return NotImplemented
        return self.value == other.value

    def __hash__(self):
        return hash(('number', self.value))


class Symbol(Token):
    """An identifier-like run such as the `set` keyword."""
    def __init__(self, name: str):
        self.name = name

    @property
    def text(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Symbol({self.name!r})"

    def __eq__(self, other):
        if not isinstance(other, Symbol):
            return NotImplemented
        return self.name == other.name

    def __hash__(self):
        return hash(('symbol', self.name))


class _Any:
    """Wildcard used in token-literal patterns. Matches every token."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "ANY"


ANY = _Any()


def is_digit_token(tok: Token) -> bool:
    """True for a single decimal-digit Char or an already merged Numeral."""
    match tok:
        case Char(c=c):
            return c in "0123456789"
        case Numeral():
            return True
    return False


def is_identifier_token(tok: Token) -> bool:
    match tok:
        case Char(c=c):
            return c.isalpha()
        case Symbol():
            return True
    return False


def token_name(tok: Token) -> str:
    """The variable-name key for an identifier token."""
    if not is_identifier_token(tok):
        raise TypeError(f"{tok!r} is not an identifier token")
    return tok.text


# =================================================================
# Variable Environment
# =================================================================

class Environment(UserDict):
    """Maps variable names to the tokens bound to them.

    Keys may be given as plain strings or as identifier tokens; they are
    stored as strings. There is no scoping: one flat namespace per
    environment.
    """

    def _normalize_key(self, key: Any) -> str:
        if isinstance(key, Token):
            return token_name(key)
        if not isinstance(key, str):
            raise TypeError(f"Environment key must be a str, not {type(key)}")
        return key

    def __setitem__(self, key: Any, value: Token):
        if not isinstance(value, Token):
            raise TypeError(f"Environment values must be tokens, not {type(value)}")
        super().__setitem__(self._normalize_key(key), value)

    def __getitem__(self, key: Any) -> Token:
        return super().__getitem__(self._normalize_key(key))

    def __delitem__(self, key: Any):
        super().__delitem__(self._normalize_key(key))

    def __contains__(self, key: Any) -> bool:
        try:
            return super().__contains__(self._normalize_key(key))
        except TypeError:
            return False

    def __repr__(self) -> str:
        keys = ', '.join(self.data.keys())
        return f"<Environment bindings=[{keys}]>"
