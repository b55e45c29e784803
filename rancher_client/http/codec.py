"""JSON encoding of request bodies and decoding of response bodies."""

import json
from typing import Any


def marshal_body(body: Any) -> bytes | None:
    """Encode a request body as compact UTF-8 JSON.

    ``None`` means no body at all. Raises ``TypeError`` or ``ValueError`` when
    the value is not JSON serializable (unsupported types, circular
    references, NaN or infinity).
    """
    if body is None:
        return None
    return json.dumps(
        body,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    ).encode("utf-8")


def unmarshal_body(content: bytes) -> Any:
    """Decode a JSON response body; an empty body decodes to ``None``."""
    if not content.strip():
        return None
    return json.loads(content)
