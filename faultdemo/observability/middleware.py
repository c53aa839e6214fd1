from __future__ import annotations

from time import perf_counter
from typing import Any, Callable, Iterable

import structlog

from faultdemo.observability.logging import format_duration


class RequestLogMiddleware:
    """Emits one access line per HTTP request, after the handler has finished."""

    def __init__(self, app: Callable[..., Any], excluded_paths: Iterable[str]) -> None:
        self.app = app
        # Liveness probes are polled constantly; keep them out of the log.
        self._excluded_paths = frozenset(excluded_paths)

    async def __call__(self, scope: dict[str, Any], receive: Callable[..., Any], send: Callable[..., Any]) -> None:
        if scope.get("type") != "http" or scope.get("path") in self._excluded_paths:
            await self.app(scope, receive, send)
            return

        path = scope.get("path")
        method = scope.get("method")

        start = perf_counter()
        status_code: int | None = None

        async def send_wrapper(message: dict[str, Any]) -> None:
            nonlocal status_code

            if message.get("type") == "http.response.start" and status_code is None:
                status_code = int(message.get("status", 200))

            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            structlog.get_logger("access").info(
                method=method,
                path=path,
                status=status_code if status_code is not None else 200,
                duration=format_duration(perf_counter() - start),
            )
