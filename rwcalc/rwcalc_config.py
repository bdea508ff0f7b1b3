"""
Settings for the rwcalc runner.

Settings come from three layers, later ones winning: built-in defaults, an
optional YAML file (explicit path, else `$RWCALC_CONFIG`), and the
`RWCALC_TRACE*` environment variables.

Example file::

    trace:
      calls: true
      results: false
      call_template: "-> {{name}}({{args}})"
    variables: true
    bindings:
      x: 3
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from rwcalc.rwcalc_trace import DEFAULT_CALL_TEMPLATE, DEFAULT_RESULT_TEMPLATE

_TRUE = {'1', 'true', 'yes', 'on'}
_FALSE = {'0', 'false', 'no', 'off', ''}


class ConfigError(ValueError):
    pass


@dataclass
class Settings:
    trace_calls: bool = False
    trace_results: bool = False
    call_template: str = DEFAULT_CALL_TEMPLATE
    result_template: str = DEFAULT_RESULT_TEMPLATE
    variables: bool = True
    bindings: Dict[str, int] = field(default_factory=dict)

    @property
    def tracing(self) -> bool:
        return self.trace_calls or self.trace_results


def _parse_flag(raw: str, var: str) -> bool:
    val = raw.strip().lower()
    if val in _TRUE:
        return True
    if val in _FALSE:
        return False
    raise ConfigError(f"{var}: expected a boolean, got {raw!r}")


def _expect(value: Any, kind, where: str):
    if not isinstance(value, kind):
        raise ConfigError(f"{where}: expected {getattr(kind, '__name__', kind)}, got {type(value).__name__}")
    return value


def _apply_file(settings: Settings, data: Mapping[str, Any], source: str):
    trace = data.get('trace') or {}
    _expect(trace, dict, f"{source}: trace")
    if 'calls' in trace:
        settings.trace_calls = _expect(trace['calls'], bool, f"{source}: trace.calls")
    if 'results' in trace:
        settings.trace_results = _expect(trace['results'], bool, f"{source}: trace.results")
    if 'call_template' in trace:
        settings.call_template = _expect(trace['call_template'], str, f"{source}: trace.call_template")
    if 'result_template' in trace:
        settings.result_template = _expect(trace['result_template'], str, f"{source}: trace.result_template")
    if 'variables' in data:
        settings.variables = _expect(data['variables'], bool, f"{source}: variables")
    bindings = data.get('bindings') or {}
    _expect(bindings, dict, f"{source}: bindings")
    for name, value in bindings.items():
        if not (isinstance(name, str) and len(name) == 1 and name.isalpha()):
            raise ConfigError(f"{source}: bindings: variable names are single letters, got {name!r}")
        # bool is a subclass of int, so check it first
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"{source}: bindings.{name}: expected an integer, got {value!r}")
        settings.bindings[name] = value


def load_settings(path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from defaults, the YAML file, then environment overrides."""
    env = os.environ if environ is None else environ
    settings = Settings()

    config_path = path or env.get('RWCALC_CONFIG')
    if config_path:
        p = Path(config_path)
        try:
            text = p.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise ConfigError(f"config file not found: {config_path}")
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigError(f"{config_path}: invalid YAML: {e}") from e
        if data is not None:
            _expect(data, dict, config_path)
            _apply_file(settings, data, config_path)

    if 'RWCALC_TRACE' in env:
        flag = _parse_flag(env['RWCALC_TRACE'], 'RWCALC_TRACE')
        settings.trace_calls = settings.trace_results = flag
    if 'RWCALC_TRACE_CALLS' in env:
        settings.trace_calls = _parse_flag(env['RWCALC_TRACE_CALLS'], 'RWCALC_TRACE_CALLS')
    if 'RWCALC_TRACE_RESULTS' in env:
        settings.trace_results = _parse_flag(env['RWCALC_TRACE_RESULTS'], 'RWCALC_TRACE_RESULTS')
    return settings
