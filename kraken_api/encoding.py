"""Request body encoding.

The signature covers the exact body string, so encoding must be deterministic:
insertion order is preserved and ``None`` values are dropped, never sent empty.
"""
from typing import Any, Iterable, Mapping, Optional
from urllib.parse import urlencode


def _to_str(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def encode_params(params: Optional[Mapping[str, Any]]) -> str:
    """Encode ``params`` as an ``application/x-www-form-urlencoded`` body.

    Args:
        params: Mapping of parameter name to scalar value or None

    Returns:
        ``k1=v1&k2=v2`` in insertion order; ``""`` for an empty mapping
    """
    if not params:
        return ""
    return urlencode([(key, _to_str(value)) for key, value in params.items() if value is not None])


def csv(values: Optional[Iterable[str]]) -> Optional[str]:
    """Join a list of ids/pairs with commas; None or empty gives None.

    A single string is taken as one value, not split into characters.
    """
    if not values:
        return None
    if isinstance(values, str):
        return values
    return ",".join(values)


def flag(value: bool) -> Optional[bool]:
    """Kraken treats absent boolean options as false, so only send True."""
    return True if value else None
