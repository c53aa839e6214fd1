from __future__ import annotations

from typing import Any

import structlog
from fastapi.responses import JSONResponse, Response


class ClientGoneResponse(Response):
    """Writes nothing: the client has already closed the connection."""

    def __init__(self) -> None:
        super().__init__(content=None)

    async def __call__(self, scope: Any, receive: Any, send: Any) -> None:
        return None


def respond_json(payload: Any, status_code: int = 200) -> Response:
    """Build a JSON response; an unencodable payload is logged and sent with an empty body."""

    try:
        return JSONResponse(payload, status_code=status_code)
    except (TypeError, ValueError) as exc:
        structlog.get_logger("http").error("failed to encode json", err=str(exc), payload=repr(payload))
        return Response(status_code=status_code, media_type="application/json")
