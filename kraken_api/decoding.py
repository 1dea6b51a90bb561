"""Response envelope decoding: ``{"error": [...], "result": ...}``."""
import json
from dataclasses import dataclass, field
from typing import Any, List, Union

from .exceptions import ApplicationError, DecodeError


@dataclass
class ApiResponse:
    """Decoded Kraken envelope.

    ``error`` and ``result`` are independent: both are returned as sent, and
    a non-empty ``error`` is left for the caller to inspect.
    """
    error: List[str] = field(default_factory=list)
    result: Any = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.error

    def raise_for_error(self) -> Any:
        """Return ``result`` or raise ApplicationError if ``error`` is non-empty."""
        if self.error:
            raise ApplicationError(self.error)
        return self.result


def decode_response(raw: Union[bytes, str]) -> ApiResponse:
    """Parse raw response bytes into an ApiResponse.

    Raises:
        DecodeError: If the payload is not JSON, not an object, or ``error`` is not a list
    """
    try:
        data = json.loads(raw)
    except (ValueError, TypeError) as e:
        raise DecodeError(f"JSON decode error: {e}") from e
    if not isinstance(data, dict):
        raise DecodeError(f"Expected a JSON object, got {type(data).__name__}")

    errors = data.get("error") or []
    if not isinstance(errors, list):
        raise DecodeError(f"Expected 'error' to be a list, got {type(errors).__name__}")
    result = data.get("result")
    if result is None:
        result = {}
    return ApiResponse(error=[str(e) for e in errors], result=result)
