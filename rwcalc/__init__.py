from rwcalc.rwcalc_datatypes import (
    Token, Char, Numeral, Number, Symbol, ANY, Environment,
    EvaluationError, UnbalancedParens, UnknownVariable, MalformedExpression, DivisionByZero,
)
from rwcalc.rwcalc_pipeline import Pass, RecursivePass, Pipeline, PassObserver, rewrite_pass, stack_before, stack_after
from rwcalc.rwcalc_passes import standard_pipeline
from rwcalc.rwcalc_variables import with_variables
from rwcalc.rwcalc_config import Settings, ConfigError, load_settings
from rwcalc.rwcalc_trace import TraceObserver
from rwcalc.rwcalc_runtime import ExecutionResult, ExpressionRunner, tokenize
