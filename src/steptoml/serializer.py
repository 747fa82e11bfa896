"""TOML-flavoured renderer for parsed documents.

The output follows a fixed textual convention rather than strict TOML:
nested dictionaries are written inline as ``{ key = value, ... }`` and
strings are quoted without escaping. Floats use one decimal place, with
``+Inf``, ``-Inf`` and ``NaN`` for non-finite results.
"""

import logging
import math

from . import values as v

logger = logging.getLogger("steptoml.serializer")


def render_value(value: v.Value) -> str:
    """Render a single value."""
    match value:
        case v.Integer(value=n):
            return str(n)
        case v.Float(value=x):
            return _float(x)
        case v.String(value=s):
            return f'"{s}"'
        case v.Identifier(name=name):
            return f'"{name}"'
        case v.Array(items=items):
            return "[" + ", ".join(render_value(item) for item in items) + "]"
        case v.Dictionary(entries=entries):
            body = ", ".join(f"{k} = {render_value(val)}" for k, val in entries.items())
            return "{ " + body + " }"
        case _:
            return "null"


def _float(x: float) -> str:
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "+Inf" if x > 0 else "-Inf"
    return f"{x:.1f}"


def to_toml(document: v.Document) -> str:
    """Render a document, one ``key = value`` line per top-level binding."""
    lines = [f"{key} = {render_value(value)}\n" for key, value in document.items()]
    logger.debug("rendered %d top-level keys", len(lines))
    return "".join(lines)
