"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.exceptions import HTTPException as StarletteHTTPException

from worklog_payroll import __version__
from worklog_payroll.api.routes import (
    employees_router,
    health_router,
    payroll_router,
    reports_router,
    worklogs_router,
)
from worklog_payroll.config import Settings, get_settings
from worklog_payroll.database import create_schema, create_session_factory, get_engine
from worklog_payroll.exceptions import PayrollError, PayrollValidationError
from worklog_payroll.logging_config import configure_logging
from worklog_payroll.services import EmployeeLocks

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Own the engine unless a session factory was injected."""
    settings: Settings = app.state.settings
    engine = None
    # Startup
    if app.state.session_factory is None:
        engine = get_engine(settings)
        await create_schema(engine)
        app.state.engine = engine
        app.state.session_factory = create_session_factory(engine)
    yield
    # Shutdown
    if engine is not None:
        await engine.dispose()
        app.state.engine = None
        app.state.session_factory = None


def create_app(
    settings: Settings | None = None,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Work Log Payroll API",
        description="Employees, daily work logs, pay previews, disbursements and monthly reports",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.engine = None
    app.state.employee_locks = EmployeeLocks()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(PayrollError)
    async def payroll_exception_handler(
        request: Request, exc: PayrollError
    ) -> JSONResponse:
        """Map domain errors to their status and a client-safe message."""
        content: dict = {"message": exc.message}
        if isinstance(exc, PayrollValidationError) and exc.errors:
            content["errors"] = exc.errors
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Reject malformed input with the same body shape as other errors."""
        return JSONResponse(
            status_code=PayrollValidationError.status_code,
            content={
                "message": "Validation failed",
                "errors": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Server error"},
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(employees_router)
    app.include_router(worklogs_router)
    app.include_router(payroll_router)
    app.include_router(reports_router)

    return app
