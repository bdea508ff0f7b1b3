"""
Call/result tracing for pipeline runs.

TraceObserver is attached to a run through `Pipeline.run(..., observer)`;
passes never know whether they are being traced.
"""
import time
from typing import Any, Dict, List, Optional, Sequence, TextIO

import pystache

from rwcalc.rwcalc_datatypes import Token
from rwcalc.rwcalc_pipeline import PassObserver
from rwcalc.rwcalc_printer import Printer

DEFAULT_CALL_TEMPLATE = "calling {{name}}({{args}})"
DEFAULT_RESULT_TEMPLATE = "{{name}}({{args}}) = {{result}}"


class TraceObserver(PassObserver):
    """Renders one line before and one line after each traced pass.

    Lines are kept in `effects` as `{'topics': ['trace'], 'message': ...}`
    records and, when a `sink` stream is given, written to it as well.
    Nested pipeline runs (bracket recursion) are indented by depth.
    """
    def __init__(self, trace_calls: bool = True, trace_results: bool = True,
                 sink: Optional[TextIO] = None,
                 call_template: str = DEFAULT_CALL_TEMPLATE,
                 result_template: str = DEFAULT_RESULT_TEMPLATE,
                 indent: str = "  "):
        self.trace_calls = trace_calls
        self.trace_results = trace_results
        self.sink = sink
        self.call_template = call_template
        self.result_template = result_template
        self.indent = indent
        self.effects: List[Dict[str, Any]] = []
        self.depth = 0
        self._printer = Printer()
        self._renderer = pystache.Renderer(escape=lambda u: u)

    def before_pass(self, name: str, tokens: Sequence[Token]) -> None:
        if self.trace_calls:
            self._emit(self.call_template, name, tokens)
        self.depth += 1

    def after_pass(self, name: str, tokens: Sequence[Token], result: Sequence[Token]) -> None:
        self.depth = max(self.depth - 1, 0)
        if self.trace_results:
            self._emit(self.result_template, name, tokens, result)

    @property
    def lines(self) -> List[str]:
        return [e['message'] for e in self.effects]

    def _emit(self, template: str, name: str, tokens: Sequence[Token], result: Optional[Sequence[Token]] = None):
        context = {
            'name': name,
            'args': self._printer.pformat(tokens),
            'result': self._printer.pformat(result) if result is not None else '',
            'depth': self.depth,
            'time': time.strftime("%d %b %H:%M:%S"),
        }
        line = self.indent * self.depth + self._renderer.render(template, context)
        self.effects.append({'topics': ['trace'], 'message': line})
        if self.sink is not None:
            print(line, file=self.sink)
