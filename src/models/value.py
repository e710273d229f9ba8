from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any, Union

# JSON-decodable datum that signatures are computed over.
Value = Union[
    None,
    bool,
    int,
    float,
    Decimal,
    str,
    Mapping[str, "Value"],
    Sequence["Value"],
]


def normalize(data: Any) -> Mapping[str, Value]:
    """Turn caller data into the object form that gets canonicalized.

    ``None`` becomes an empty object, mappings pass through unchanged and
    typed models are converted through their own ``to_value()``.
    """
    if data is None:
        return {}
    if isinstance(data, Mapping):
        return data
    to_value = getattr(data, "to_value", None)
    if callable(to_value):
        return to_value()
    raise TypeError(f"cannot normalize {type(data).__name__} into a signable object")
