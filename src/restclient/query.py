"""Form encoding of request parameters."""

from collections.abc import Iterable, Mapping
from typing import Any
from urllib.parse import quote_plus, unquote_plus

from .exceptions import InvalidParameterError

Scalar = str | int | float | bool
ParameterValue = Scalar | list[Scalar] | tuple[Scalar, ...] | None
Parameters = Mapping[str, ParameterValue] | Iterable[tuple[str, ParameterValue]]


def _quote(value: str) -> str:
    # quote_plus leaves "~" alone; standard form submission escapes it.
    return quote_plus(value, safe="").replace("~", "%7E")


def _scalar_to_str(key: str, value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise InvalidParameterError(
        f"Parameter {key!r} must be a scalar or a list of scalars, got {type(value).__name__}"
    )


def _iter_pairs(parameters: Parameters) -> Iterable[tuple[str, Any]]:
    if isinstance(parameters, Mapping):
        return parameters.items()
    return parameters


def format_query(parameters: Parameters, indexed_arrays: bool = False) -> str:
    """
    Encode parameters as a query string or form body.

    List values repeat the key with a ``[]`` suffix, or ``[0]``, ``[1]``, ...
    when ``indexed_arrays`` is set. ``None`` values are skipped.

    Raises:
        InvalidParameterError: If a value is neither a scalar nor a list of scalars.
    """
    pairs: list[str] = []
    for key, value in _iter_pairs(parameters):
        key = str(key)
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            for index, element in enumerate(value):
                suffix = f"[{index}]" if indexed_arrays else "[]"
                pairs.append(f"{_quote(key + suffix)}={_quote(_scalar_to_str(key, element))}")
        else:
            pairs.append(f"{_quote(key)}={_quote(_scalar_to_str(key, value))}")
    return "&".join(pairs)


def parse_query(query: str) -> list[tuple[str, str]]:
    """Decode a form-encoded string back into ordered (key, value) pairs."""
    if not query:
        return []
    result = []
    for segment in query.split("&"):
        key, _, value = segment.partition("=")
        result.append((unquote_plus(key), unquote_plus(value)))
    return result
