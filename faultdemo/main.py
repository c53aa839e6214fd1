from __future__ import annotations

import socket
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError

from faultdemo.api.demo import router as demo_router
from faultdemo.config import get_settings
from faultdemo.db.session import close_store, get_engine, open_store
from faultdemo.observability.logging import configure_logging, fatal
from faultdemo.observability.middleware import RequestLogMiddleware
from faultdemo.services.background import drain_background


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    configure_logging()
    get_engine()
    yield
    await drain_background()
    close_store()


app = FastAPI(
    title="Fault Demo",
    version="0.1.0",
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
    lifespan=lifespan,
)
app.include_router(demo_router)
app.add_middleware(RequestLogMiddleware, excluded_paths=("/health",))


def _bind(host: str, port: int) -> socket.socket:
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
    except OSError:
        sock.close()
        raise
    return sock


def main() -> None:
    settings = get_settings()
    configure_logging()

    try:
        open_store()
    except SQLAlchemyError as exc:
        fatal("failed to open db", exc)

    try:
        sock = _bind(settings.host, settings.port)
    except OSError as exc:
        fatal("failed to bind", exc)

    structlog.get_logger("faultdemo").info("starting server", addr=settings.addr)

    config = uvicorn.Config(app, log_config=None, access_log=False, log_level="info")
    server = uvicorn.Server(config)
    try:
        server.run(sockets=[sock])
    except Exception as exc:  # noqa: BLE001 - anything escaping the server loop is fatal
        fatal("server exited", exc)
