"""
SmartAd Console Main Application
================================

FastAPI entry point for the SmartAd demonstration console.

The presentation layer talks to the console only through these endpoints:
commands go in, read-only snapshots come out.

Endpoints:
    GET    /              - Service information
    GET    /health        - Liveness probe
    GET    /state         - Rotation snapshot (now showing)
    GET    /analytics     - Dashboard statistics
    GET    /output        - Full console snapshot
    POST   /play/toggle   - Pause / resume playback
    POST   /active/toggle - Start / stop detection sampling
    PUT    /target        - Target an audience manually
    DELETE /target        - Clear the target
    WS     /ws/output     - Real-time snapshot stream
"""

import asyncio
import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from smartad_console.config import settings
from smartad_console.console import SmartAdConsole
from smartad_console.models.ad import Gender


logger = logging.getLogger(__name__)


# =============================================================================
# Global State
# =============================================================================

_console: Optional[SmartAdConsole] = None


def get_console() -> SmartAdConsole:
    if _console is None:
        raise HTTPException(status_code=503, detail="Console not started")
    return _console


# =============================================================================
# Request Models
# =============================================================================

class TargetRequest(BaseModel):
    """Manual targeting command."""

    age: int = Field(..., ge=0, description="Target age in years")
    gender: Gender = Field(..., description="Target gender")


# =============================================================================
# Lifespan Management
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: build and start the console, stop it on exit."""
    global _console

    logger.info(f"Starting {settings.app.name} {settings.app.version}")
    _console = SmartAdConsole.from_settings(settings)
    _console.start()

    try:
        yield
    finally:
        logger.info("Shutting down gracefully...")
        _console.stop()
        _console = None
        logger.info("Shutdown complete")


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="SmartAd Console",
    description="Demographic ad targeting and rotation with rolling analytics",
    version=settings.app.version,
    lifespan=lifespan,
)


# =============================================================================
# HTTP Endpoints
# =============================================================================

@app.get("/")
async def root() -> JSONResponse:
    """Service information endpoint."""
    console = get_console()
    return JSONResponse({
        "service": "SmartAdConsole",
        "version": settings.app.version,
        "name": settings.app.name,
        "status": "running",
        "catalog_size": len(console.scheduler.catalog),
    })


@app.get("/health")
async def health() -> JSONResponse:
    """
    Liveness probe. Always 200 while the process is up.

    Reports "degraded" when an invariant violation has stopped a timer
    (rotation or sampling is frozen).
    """
    if _console is None:
        return JSONResponse({"status": "healthy", "uptime_seconds": 0, "failed_timers": []})

    failed = _console.failed_timers
    return JSONResponse({
        "status": "degraded" if failed else "healthy",
        "uptime_seconds": _console.uptime_seconds,
        "failed_timers": failed,
    })


@app.get("/state")
async def state() -> JSONResponse:
    """Rotation snapshot for the "now showing" panel."""
    return JSONResponse(get_console().rotation().model_dump(mode="json"))


@app.get("/analytics")
async def analytics() -> JSONResponse:
    """Dashboard statistics."""
    console = get_console()
    summary = console.aggregator.summary(
        recent_window_ms=console.recent_window_ms,
        activity_limit=console.activity_limit,
    )
    return JSONResponse(summary.model_dump(mode="json"))


@app.get("/output")
async def output() -> JSONResponse:
    """Full console snapshot."""
    return JSONResponse(get_console().snapshot().model_dump(mode="json"))


@app.post("/play/toggle")
async def toggle_play() -> JSONResponse:
    """Pause or resume the current ad."""
    new_state = get_console().toggle_play()
    return JSONResponse({"state": new_state.value})


@app.post("/active/toggle")
async def toggle_active() -> JSONResponse:
    """Start or stop detection sampling."""
    console = get_console()
    is_active = console.toggle_active()
    return JSONResponse({
        "is_active": is_active,
        "sensor_available": console.sampler.available,
    })


@app.put("/target")
async def set_target(request: TargetRequest) -> JSONResponse:
    """Target an audience manually."""
    console = get_console()
    console.set_target(request.age, request.gender)
    return JSONResponse(console.rotation().model_dump(mode="json"))


@app.delete("/target")
async def clear_target() -> JSONResponse:
    """Clear the target; playback goes idle."""
    console = get_console()
    console.clear_target()
    return JSONResponse(console.rotation().model_dump(mode="json"))


# =============================================================================
# WebSocket Endpoints
# =============================================================================

@app.websocket("/ws/output")
async def output_stream(websocket: WebSocket) -> None:
    """WebSocket endpoint pushing a snapshot every second."""
    await websocket.accept()
    logger.info("Client connected to /ws/output")

    try:
        while _console is not None:
            await websocket.send_json(_console.snapshot().model_dump(mode="json"))
            await asyncio.sleep(1.0)
    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.warning(f"WebSocket error: {e}")
    finally:
        logger.info("Client disconnected from /ws/output")


# =============================================================================
# Main Entry Point
# =============================================================================

def run() -> None:
    """Run the service with uvicorn."""
    import uvicorn

    port = int(os.environ.get("PORT", settings.server.port))

    uvicorn.run(
        "smartad_console.main:app",
        host=settings.server.host,
        port=port,
        reload=False,
    )


if __name__ == "__main__":
    run()
