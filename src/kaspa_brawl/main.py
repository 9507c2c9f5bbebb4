# src/kaspa_brawl/main.py
"""Main entry point for the Kaspa Brawl API."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from kaspa_brawl.api import (
    auth_router,
    debug_router,
    fight_logs_router,
    fighters_router,
    matchmaking_router,
    wallet_router,
)
from kaspa_brawl.core.errors import KaspaBrawlError, StorageError
from kaspa_brawl.core.settings import settings
from kaspa_brawl.services.housekeeping import PeriodicSweepWorker

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Kaspa Brawl API",
    description="Wallet authentication and game data for Kaspa Brawl",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(auth_router, prefix="/api")
app.include_router(fight_logs_router, prefix="/api")
app.include_router(fighters_router, prefix="/api")
app.include_router(matchmaking_router, prefix="/api")
app.include_router(wallet_router, prefix="/api")
if settings.debug:
    app.include_router(debug_router, prefix="/api")


@app.exception_handler(KaspaBrawlError)
async def handle_domain_error(request: Request, exc: KaspaBrawlError) -> JSONResponse:
    if isinstance(exc, StorageError):
        logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"Invalid {location}" if location else "Invalid request"
    return JSONResponse(
        status_code=400,
        content={"error": message, "code": "validation_failed"},
    )


@app.on_event("startup")
async def on_startup() -> None:
    logger.info(
        "Starting %s (%s, nonce backend %s, verification %s)",
        settings.app_name,
        settings.environment,
        settings.nonce_backend,
        settings.verification_policy.value,
    )
    if settings.nonce_sweep_interval_seconds > 0:
        worker = PeriodicSweepWorker(interval=settings.nonce_sweep_interval_seconds)
        await worker.start()
        app.state.sweep_worker = worker
    else:
        app.state.sweep_worker = None


@app.on_event("shutdown")
async def on_shutdown() -> None:
    worker: PeriodicSweepWorker | None = getattr(app.state, "sweep_worker", None)
    if worker:
        await worker.stop()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "Kaspa Brawl API",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


def run() -> None:
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run("kaspa_brawl.main:app", host="0.0.0.0", port=8000, reload=settings.debug)


if __name__ == "__main__":
    run()
