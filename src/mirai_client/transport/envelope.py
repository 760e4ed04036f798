"""
Envelope checking: the one place a nonzero status turns into an error.
"""

from typing import Any, Optional

from pydantic import ValidationError

from mirai_client.errors import DecodeError, MiraiError, RequestError
from mirai_client.models.envelope import Envelope


def parse_envelope(raw: Any) -> Optional[Envelope]:
    """Parse a response body as an envelope. Returns None for non-object bodies."""
    if not isinstance(raw, dict):
        return None
    try:
        return Envelope.model_validate(raw)
    except ValidationError as e:
        raise DecodeError(f"Malformed response envelope: {e}", details={"body": raw}) from e


def check_response(
    raw: Any,
    field: Optional[str] = None,
    error: type[MiraiError] = RequestError,
) -> Any:
    """Raise `error` if the envelope carries a failure code, else return the payload.

    The payload is `raw[field]` when a field is named, otherwise the whole body.
    The server's `msg` is passed through unchanged as the error message.
    """
    envelope = parse_envelope(raw)
    if envelope is not None and not envelope.ok:
        message = envelope.msg if envelope.msg is not None else f"Request failed with code {envelope.code}"
        raise error(message, details={"code": envelope.code})
    if field is None:
        return raw
    if envelope is None or field not in raw:
        raise DecodeError(f"Response is missing field {field!r}", details={"body": raw})
    return raw[field]
