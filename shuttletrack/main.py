from __future__ import annotations

import logging
import os
import threading
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shuttletrack.adapters.api.controllers.tracking import router as tracking_router
from shuttletrack.adapters.api.dependencies import (
    build_location_feed,
    build_model_service,
    build_tracking_manager,
)
from shuttletrack.app.ports.output import ILocationFeed
from shuttletrack.app.services.tracking_manager import TrackingManager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Wire feed -> tracking manager and run both loops in background threads.

    Configuration errors (e.g. an invalid interval) surface here and abort
    startup.
    """

    model_service = build_model_service()
    manager = build_tracking_manager(model_service)
    feed = build_location_feed(model_service)

    runners: list[TrackingManager | ILocationFeed] = [manager]
    if feed is not None:
        feed.subscribe(manager.on_location)
        runners.append(feed)
    else:
        logger.warning("No location feed configured; nothing will be tracked")

    threads = [
        threading.Thread(target=r.run, name=type(r).__name__, daemon=True)
        for r in runners
    ]
    for t in threads:
        t.start()

    app.state.model_service = model_service
    app.state.tracking_manager = manager
    try:
        yield
    finally:
        for r in runners:
            r.stop()
        for t in threads:
            t.join(timeout=5.0)


app = FastAPI(title="Shuttle Tracker", lifespan=lifespan)
app.include_router(tracking_router)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Ensure API errors are JSON so the map frontend can display them."""

    logging.getLogger("uvicorn.error").exception(
        "Unhandled exception", extra={"path": str(request.url.path)}
    )

    reveal = (os.getenv("SHUTTLETRACK_REVEAL_ERRORS") or "").strip().lower() in {
        "1",
        "true",
        "yes",
        "on",
    }

    if reveal or isinstance(exc, (FileNotFoundError, RuntimeError, ValueError)):
        detail = str(exc) or exc.__class__.__name__
    else:
        detail = "Internal Server Error"

    return JSONResponse(status_code=500, content={"detail": detail})


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
