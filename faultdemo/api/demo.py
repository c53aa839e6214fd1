from __future__ import annotations

import asyncio

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse, Response

from faultdemo.api.responses import ClientGoneResponse, respond_json
from faultdemo.db.session import get_engine
from faultdemo.services.background import panic_task, spawn_supervised
from faultdemo.services.migration_service import MigrationError, run_faulty_migration

router = APIRouter(tags=["demo"])

SLOW_DELAY_SECONDS = 6.0
DISCONNECT_CAUSE = "client disconnected"


async def _wait_for_disconnect(request: Request) -> None:
    while True:
        message = await request.receive()
        if message["type"] == "http.disconnect":
            return


@router.get("/")
async def index() -> Response:
    return respond_json({"message": "demo service"})


@router.get("/panic")
async def trigger_panic() -> Response:
    spawn_supervised(panic_task)
    return respond_json({"status": "goroutine panic triggered"})


@router.get("/slow")
async def slow(request: Request) -> Response:
    timer = asyncio.ensure_future(asyncio.sleep(SLOW_DELAY_SECONDS))
    disconnect = asyncio.ensure_future(_wait_for_disconnect(request))
    try:
        done, _ = await asyncio.wait({timer, disconnect}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for waiter in (timer, disconnect):
            waiter.cancel()
        await asyncio.gather(timer, disconnect, return_exceptions=True)

    if timer in done:
        return respond_json({"status": "slow response"})

    structlog.get_logger("http").error("context canceled", path=request.url.path, err=DISCONNECT_CAUSE)
    return ClientGoneResponse()


@router.get("/migrate")
def migrate() -> Response:
    try:
        run_faulty_migration(get_engine())
    except MigrationError as exc:
        structlog.get_logger("http").error("migration failed", err=str(exc))
        return PlainTextResponse("migration failed", status_code=500)
    return respond_json({"status": "migration succeeded (unexpected)"})


@router.get("/health")
async def health() -> PlainTextResponse:
    return PlainTextResponse("ok")
