# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Card Draw Service
=================
Draws a rotating duty card for a group member on a meeting date, honouring
per-member allow-lists, per-date card capacity and a no-immediate-repeat
preference, then projects the draws into the meeting schedule.

Port: 8005
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from carddraw.controllers import (
    admin_controller,
    assign_controller,
    schedule_controller,
    system_controller,
)
from carddraw.core.config import settings
from carddraw.core.database import create_schema, engine
from carddraw.core.dependencies import get_assignment_repo
from carddraw.core.logging import get_logger
from carddraw.metrics.prometheus import STORED_ASSIGNMENTS
from carddraw.middleware import MetricsMiddleware, RequestIDMiddleware
from carddraw.repositories.assignment_repository import STORE_ERRORS
from carddraw.services.errors import InvalidInput, PersistenceFailure

logger = get_logger(__name__)

ASSIGN_PATH = "/api/v1/assign"


# ── Lifespan ──────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    if engine is not None:
        try:
            create_schema(engine)
            logger.info("Assignments schema ready")
        except STORE_ERRORS:
            logger.warning("Could not create schema, database may not be ready yet")
    try:
        STORED_ASSIGNMENTS.set(get_assignment_repo().count())
    except STORE_ERRORS:
        logger.warning("Could not seed gauges, store unreachable")
    logger.info("Service started: %s v%s", settings.SERVICE_NAME, settings.SERVICE_VERSION)
    yield
    if engine is not None:
        engine.dispose()
        logger.info("Shutting down, connection pool disposed")


# ── FastAPI App ───────────────────────────────────────────────────────────
app = FastAPI(
    title="Card Draw Service",
    description="Draws rotating meeting duties for group members.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIDMiddleware)


@app.exception_handler(PersistenceFailure)
async def persistence_failure_handler(request: Request, exc: PersistenceFailure):
    logger.error("Store failure on %s: %s", request.url.path, exc.cause)
    return JSONResponse(
        status_code=503,
        content={"detail": exc.message, "code": exc.code},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # a draw request that is not a JSON object is invalid input like any other
    if request.url.path == ASSIGN_PATH:
        return JSONResponse(
            status_code=400,
            content={"detail": "Request body must be a JSON object with 'member' and 'date'.",
                     "code": InvalidInput.code},
        )
    return await request_validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception")
    return JSONResponse(
        status_code=500,
        content={"detail": "internal_server_error", "error": str(exc)},
    )


app.include_router(system_controller.router)
app.include_router(assign_controller.router)
app.include_router(schedule_controller.router)
app.include_router(admin_controller.router)


# ── Entrypoint ────────────────────────────────────────────────────────────
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.SERVICE_PORT, log_level="info")
