"""
A pretty-printer for rwcalc tokens and token sequences.
"""
import collections.abc

from rwcalc.rwcalc_datatypes import Char, Numeral, Number, Symbol, Environment, ANY


class Printer:
    """Formats tokens as the source text they stand for."""

    def __init__(self, separator=" "):
        self._separator = separator
        self._handlers = self._create_handlers()

    def pformat(self, obj):
        """Public entry point to format an object."""
        handler = self._get_handler(obj)
        return handler(obj)

    def _get_handler(self, obj):
        """Dispatcher to find the correct formatting method."""
        if obj is ANY: return lambda o: '_'

        obj_type = type(obj)
        if obj_type in self._handlers:
            return self._handlers[obj_type]
        if isinstance(obj, Environment): return self._pformat_environment
        if isinstance(obj, collections.abc.Sequence) and not isinstance(obj, str):
            return self._pformat_sequence
        # Default to Python's repr for unknown types
        return repr

    def _create_handlers(self):
        return {
            Char: self._pformat_text,
            Numeral: self._pformat_text,
            Symbol: self._pformat_text,
            Number: self._pformat_number,
            int: self._pformat_primitive,
            float: self._pformat_float,
            bool: self._pformat_primitive,
            type(None): lambda o: 'none',
        }

    def _pformat_text(self, obj):
        return obj.text

    def _pformat_primitive(self, obj):
        return str(obj)

    def _pformat_float(self, obj):
        # repr keeps the shortest round-tripping digits
        return repr(obj)

    def _pformat_number(self, obj):
        return self.pformat(obj.value)

    def _pformat_sequence(self, obj):
        return self._separator.join(self.pformat(tok) for tok in obj)

    def _pformat_environment(self, obj):
        items = ", ".join(f"{k}: {self.pformat(v)}" for k, v in obj.items())
        return "{" + items + "}"
