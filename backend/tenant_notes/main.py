from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tenant_notes.core.config import settings
import tenant_notes.models  # noqa: F401  # force model registration

from tenant_notes.api.v1.auth import router as auth_router
from tenant_notes.api.v1.notes import router as notes_router
from tenant_notes.api.v1.tenants import router as tenants_router
from tenant_notes.db.init_db import create_schema, seed_demo_data
from tenant_notes.db.session import AsyncSessionLocal, engine
from tenant_notes.utils.logging import get_logger, setup_logging

setup_logging(
    log_level=settings.LOG_LEVEL,
    json_format=(settings.ENVIRONMENT.strip().lower() == "production"),
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Explicit one-time initialization: nothing on the request path checks
    # whether the store is ready.
    logger.info("Starting notes API (%s)", settings.ENVIRONMENT)

    if settings.AUTO_CREATE_SCHEMA:
        await create_schema(engine)

    if settings.SEED_DEMO_DATA:
        async with AsyncSessionLocal() as session:
            await seed_demo_data(session)

    yield

    await engine.dispose()
    logger.info("Notes API stopped")


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = [str(p) for p in first.get("loc", ()) if p != "body"]
    field = ".".join(loc)
    msg = first.get("msg", "invalid value")
    return f"{field}: {msg}" if field else f"Invalid request body: {msg}"


def register_exception_handlers(app: FastAPI) -> None:
    """
    Every error leaves the API as {"error": "<message>"}.
    """

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        # Missing / ill-typed fields are a client error, reported as 400.
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": _validation_message(exc)},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        # Full detail goes to the log only; callers get a generic message.
        logger.error(
            "Unhandled exception: %s",
            type(exc).__name__,
            exc_info=exc,
            extra={"path": request.url.path, "method": request.method},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )


def create_application() -> FastAPI:
    app = FastAPI(title="Tenant Notes API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.get("/")
    def root():
        return {"status": "ok", "service": "tenant-notes"}

    # Routers
    app.include_router(auth_router)
    app.include_router(notes_router)
    app.include_router(tenants_router)

    return app


app = create_application()
