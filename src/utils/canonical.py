"""Canonical string form of a value tree, the exact text that gets signed.

The layout follows the gateway's JVM implementation, including the quirks
that must be kept for signatures to match:

* ``None`` renders as ``key=`` at the top level but ``key=null`` when nested.
* Arrays are only bracket-formatted (``key=[a,b]``) inside an object. A
  top-level array falls back to the plain JVM list rendering ``[a, b]``.
* Map keys are sorted everywhere except below a list nested in a list,
  which renders in insertion order.
"""

import math
from collections.abc import Mapping
from decimal import Decimal
from enum import Enum

from src.models.value import Value


def canonicalize(root: Mapping[str, Value]) -> str:
    """Render ``root`` as ``k1=v1&k2=v2`` with keys in sorted order."""
    parts = []
    for key in sorted(root, key=str):
        value = root[key]
        if value is None:
            parts.append(f"{key}=")
        elif isinstance(value, Mapping):
            parts.append(f"{key}={{{_format_object(value)}}}")
        else:
            parts.append(f"{key}={plain_string(value)}")
    return "&".join(parts)


def _format_object(obj: Mapping[str, Value]) -> str:
    entries = []
    for key in sorted(obj, key=str):
        value = obj[key]
        if isinstance(value, Mapping):
            entries.append(f"{key}={{{_format_object(value)}}}")
        elif isinstance(value, (list, tuple)):
            entries.append(f"{key}=[{_format_array(value)}]")
        else:
            # plain_string(None) is "null"
            entries.append(f"{key}={plain_string(value)}")
    return ",".join(entries)


def _format_array(items) -> str:
    # A list directly inside a list is rendered verbatim, insertion order and all
    return ",".join(
        f"{{{_format_object(item)}}}" if isinstance(item, Mapping) else plain_string(item, sort_keys=False)
        for item in items
    )


def plain_string(value: Value, sort_keys: bool = True) -> str:
    """Stringify a value the way the JVM's ``String.valueOf`` does.

    Map keys are sorted while ``sort_keys`` holds. It is dropped for lists
    nested in lists, whose maps keep insertion order all the way down.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return format_double(value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, Mapping):
        keys = sorted(value, key=str) if sort_keys else list(value)
        inner = ", ".join(f"{k}={plain_string(value[k], sort_keys)}" for k in keys)
        return "{" + inner + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(
            plain_string(item, sort_keys and not isinstance(item, (list, tuple))) for item in value
        ) + "]"
    raise TypeError(f"unsupported value type in signature tree: {type(value).__name__}")


def format_double(value: float) -> str:
    """Format a float like ``Double.toString``.

    Magnitudes in [1e-3, 1e7) are positional with at least one fractional
    digit (``100.0``); everything else uses ``d.dddE<n>`` (``1.0E7``).
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "-0.0" if math.copysign(1.0, value) < 0 else "0.0"
    if 1e-3 <= abs(value) < 1e7:
        return repr(value)

    sign, digits, exponent = Decimal(repr(value)).normalize().as_tuple()
    text = "".join(str(d) for d in digits)
    power = len(text) - 1 + exponent
    mantissa = text[0] + "." + (text[1:] or "0")
    return f"{'-' if sign else ''}{mantissa}E{power}"
