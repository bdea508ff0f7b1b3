"""
Pass composition for the rwcalc rewrite engine.

A Pipeline is an immutable, ordered tuple of passes. Composition returns a
new Pipeline; nothing here holds process-wide state. Operator precedence
and evaluation order are encoded purely by where each pass is inserted.
"""

import copy
from abc import ABC, abstractmethod
from typing import Callable, Iterable, List, Optional, Sequence

from rwcalc.rwcalc_datatypes import Token


class PassObserver(ABC):
    """Receives a report before and after each traceable pass runs."""

    @abstractmethod
    def before_pass(self, name: str, tokens: Sequence[Token]) -> None: raise NotImplementedError

    @abstractmethod
    def after_pass(self, name: str, tokens: Sequence[Token], result: Sequence[Token]) -> None: raise NotImplementedError


class Pass:
    """A named token-sequence rewrite.

    `traceable` is the capability flag consulted by Pipeline.run: passes
    with `traceable=False` are never reported to an observer.
    """
    def __init__(self, name: str, fn: Callable[[Sequence[Token]], Iterable[Token]], traceable: bool = True):
        self.name = name
        self.fn = fn
        self.traceable = traceable

    def __call__(self, tokens: Sequence[Token], observer: Optional[PassObserver] = None) -> List[Token]:
        return list(self.fn(tokens))

    def __repr__(self) -> str:
        return f"<Pass {self.name}>"


class RecursivePass(Pass, ABC):
    """A pass that runs a whole pipeline on part of its input.

    A Pipeline binds every RecursivePass it holds to itself when it is
    constructed, so the recursion always sees the finished pass list.
    """
    def __init__(self, name: str, traceable: bool = True):
        super().__init__(name, None, traceable)
        self.pipeline: Optional['Pipeline'] = None

    def bind(self, pipeline: 'Pipeline') -> 'RecursivePass':
        """Return a copy of this pass that recurses into `pipeline`."""
        bound = copy.copy(self)
        bound.pipeline = pipeline
        return bound

    def __call__(self, tokens: Sequence[Token], observer: Optional[PassObserver] = None) -> List[Token]:
        if self.pipeline is None:
            raise RuntimeError(f"{self.name} is not bound to a pipeline")
        return self.rewrite(tokens, observer)

    def recurse(self, tokens: Sequence[Token], observer: Optional[PassObserver] = None) -> List[Token]:
        return self.pipeline.run(tokens, observer)

    @abstractmethod
    def rewrite(self, tokens: Sequence[Token], observer: Optional[PassObserver] = None) -> List[Token]:
        raise NotImplementedError


def rewrite_pass(name: str, traceable: bool = True):
    """A decorator that turns a `tokens -> tokens` function into a Pass."""
    def wrap(fn):
        return Pass(name, fn, traceable)
    return wrap


class Pipeline:
    """An ordered composition of passes, applied first to last."""

    def __init__(self, passes: Iterable[Pass] = ()):
        self.passes = tuple(
            p.bind(self) if isinstance(p, RecursivePass) else p
            for p in passes
        )

    def insert_front(self, p: Pass) -> 'Pipeline':
        """New pipeline that runs `p` before every pass already present."""
        return Pipeline((p,) + self.passes)

    def insert_end(self, p: Pass) -> 'Pipeline':
        """New pipeline that runs `p` after every pass already present."""
        return Pipeline(self.passes + (p,))

    def run(self, tokens: Sequence[Token], observer: Optional[PassObserver] = None) -> List[Token]:
        seq = list(tokens)
        for p in self.passes:
            report = observer is not None and p.traceable
            if report:
                observer.before_pass(p.name, seq)
            result = p(seq, observer)
            if report:
                observer.after_pass(p.name, seq, result)
            seq = result
        return seq

    def __call__(self, tokens: Sequence[Token], observer: Optional[PassObserver] = None) -> List[Token]:
        return self.run(tokens, observer)

    def names(self) -> List[str]:
        return [p.name for p in self.passes]

    def __len__(self) -> int:
        return len(self.passes)

    def __repr__(self) -> str:
        return f"<Pipeline passes=[{', '.join(self.names())}]>"


def stack_before(pipeline: Pipeline, p: Pass) -> Pipeline:
    return pipeline.insert_front(p)


def stack_after(pipeline: Pipeline, p: Pass) -> Pipeline:
    return pipeline.insert_end(p)
