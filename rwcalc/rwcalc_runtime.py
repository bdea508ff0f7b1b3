# rwcalc_runtime.py

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Union

from rwcalc.rwcalc_datatypes import (
    Token, Char, Number, Environment,
    EvaluationError, UnbalancedParens, UnknownVariable, MalformedExpression, DivisionByZero,
    is_identifier_token, token_name,
)
from rwcalc.rwcalc_pipeline import Pipeline, PassObserver
from rwcalc.rwcalc_passes import standard_pipeline, LPAREN
from rwcalc.rwcalc_variables import with_variables
from rwcalc.rwcalc_config import Settings
from rwcalc.rwcalc_trace import TraceObserver
from rwcalc.rwcalc_printer import Printer


def tokenize(source: str) -> List[Char]:
    """Split `source` into one Char per non-whitespace character."""
    return [Char(c, pos) for pos, c in enumerate(source) if not c.isspace()]


def final_value(tokens: List[Token]) -> Union[int, float]:
    """The value of a fully reduced sequence, or the error explaining why it isn't one."""
    match tokens:
        case [Number(value=value)]:
            return value
        case []:
            raise MalformedExpression("empty expression")
        case [tok] if is_identifier_token(tok):
            raise UnknownVariable(token_name(tok), tok)
    for tok in tokens:
        if tok == LPAREN:
            raise UnbalancedParens("unmatched '('", tok)
    offender = next((t for t in tokens if not isinstance(t, Number)), tokens[-1])
    rendered = Printer().pformat(tokens)
    raise MalformedExpression(f"does not reduce to a single number: {rendered}", offender)


# ===================================================================
# Expression Execution
# ===================================================================

@dataclass
class ExecutionResult:
    """The structured result of evaluating one expression."""
    status: Literal['success', 'error']
    value: Any = None
    tokens: List[Token] = field(default_factory=list)
    error_kind: Optional[str] = None
    error_message: Optional[str] = None
    side_effects: List[Dict] = field(default_factory=list)

    def format_error(self) -> str:
        if self.status != 'error':
            return ""
        return str(self.error_message or "Unknown error")


class ExpressionRunner:
    """Owns a pipeline and a variable environment and evaluates expressions with them."""

    def __init__(self, settings: Optional[Settings] = None,
                 pipeline: Optional[Pipeline] = None,
                 environment: Optional[Environment] = None):
        self.settings = settings or Settings()
        self.environment = environment if environment is not None else Environment()
        for name, value in self.settings.bindings.items():
            self.environment[name] = Number(value)
        if pipeline is None:
            pipeline = standard_pipeline()
            if self.settings.variables:
                pipeline = with_variables(pipeline, self.environment)
        self.pipeline = pipeline

    def make_observer(self, sink=None) -> Optional[TraceObserver]:
        """A TraceObserver configured from settings, or None when tracing is off."""
        s = self.settings
        if not s.tracing:
            return None
        return TraceObserver(
            trace_calls=s.trace_calls,
            trace_results=s.trace_results,
            sink=sink,
            call_template=s.call_template,
            result_template=s.result_template,
        )

    def evaluate(self, source: str, observer: Optional[PassObserver] = None) -> List[Token]:
        """Run the pipeline once over `source`; returns the final token sequence."""
        return self.pipeline.run(tokenize(source), observer)

    def compute(self, source: str, observer: Optional[PassObserver] = None) -> Union[int, float]:
        return final_value(self.evaluate(source, observer))

    def handle_expression(self, source: str, sink=None) -> ExecutionResult:
        """Evaluate `source`, reporting failures in the result instead of raising."""
        observer = self.make_observer(sink)
        tokens: List[Token] = []
        try:
            tokens = self.evaluate(source, observer)
            value = final_value(tokens)
        except EvaluationError as e:
            msg = self._format_error(e, source)
            effects = list(observer.effects) if observer else []
            effects.append({'topics': ['stderr'], 'message': msg})
            return ExecutionResult(
                status='error',
                tokens=tokens,
                error_kind=e.kind,
                error_message=msg,
                side_effects=effects,
            )
        effects = list(observer.effects) if observer else []
        return ExecutionResult(status='success', value=value, tokens=tokens, side_effects=effects)

    def _format_error(self, e: EvaluationError, source: str) -> str:
        match e:
            case UnbalancedParens():
                msg = f"UnbalancedParens: {e.message}"
            case UnknownVariable() as uv:
                msg = f"UnknownVariable: '{uv.name}' is not bound"
            case DivisionByZero():
                msg = f"DivisionByZero: {e.message}"
            case MalformedExpression():
                msg = f"MalformedExpression: {e.message}"
            case _:
                msg = f"{e.kind}: {e.message}"

        pos = getattr(e.token, 'pos', None)
        if pos is not None:
            msg = f"{msg}\n(col {pos + 1})\n{self._source_context(source, pos)}"
        return msg

    def _source_context(self, source: str, pos: int) -> str:
        return f"  | {source}\n  | {' ' * pos}^"
