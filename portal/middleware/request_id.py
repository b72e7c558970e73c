"""Request ID middleware.

Forwards a client X-Request-ID when it is safe to log, otherwise generates
one, and echoes it on the response. Raw ASGI so streaming responses and
background tasks are unaffected.
"""

import re
import uuid
from typing import Callable


REQUEST_ID_MAX_LENGTH = 64
REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


def _header_value(scope: dict, name: str) -> str | None:
    """First value of header name (case-insensitive); headers are (bytes, bytes)."""
    wanted = name.lower().encode()
    for key, value in scope.get("headers", []):
        if key.lower() == wanted:
            return value.decode("utf-8", errors="replace")
    return None


def sanitize_request_id(raw: str | None) -> str:
    """Return raw stripped if it is 1-64 safe characters, else a fresh UUID4."""
    candidate = (raw or "").strip()
    if (
        not candidate
        or len(candidate) > REQUEST_ID_MAX_LENGTH
        or not REQUEST_ID_PATTERN.match(candidate)
    ):
        return str(uuid.uuid4())
    return candidate


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    """Set scope state request_id and add header_name to every HTTP response."""
    encoded_name = header_name.lower().encode()

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = sanitize_request_id(_header_value(scope, header_name))
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_id(message: dict) -> None:
            if message["type"] == "http.response.start":
                headers = [
                    (k, v) for k, v in message.get("headers", []) if k.lower() != encoded_name
                ]
                headers.append((encoded_name, request_id.encode()))
                message["headers"] = headers
            await send(message)

        await app(scope, receive, send_with_id)

    return asgi_app
