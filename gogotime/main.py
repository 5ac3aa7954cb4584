# GoGoTime - Main Application
# FastAPI application factory and startup

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from gogotime import __version__
from gogotime.config import get_settings
from gogotime.database import check_connection
from gogotime.errors import GoGoTimeError
from gogotime.logging_config import setup_logging
from gogotime.validation import format_violations


settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan events.

    Runs on startup and shutdown.
    """
    setup_logging(settings.log_level, settings.log_file)
    logger.info("Starting %s %s", settings.app_name, __version__)

    # Verify database connection
    try:
        check_connection()
        logger.info("Database connection: OK")
    except SQLAlchemyError:
        logger.exception("Database connection: FAILED")
        if not settings.debug:
            raise

    yield

    logger.info("Shutting down %s", settings.app_name)


def register_exception_handlers(app: FastAPI) -> None:
    """Render every failure as {"error", "message", "details"}."""

    @app.exception_handler(GoGoTimeError)
    async def gogotime_error_handler(request: Request, exc: GoGoTimeError):
        headers = None
        if exc.status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        violations = format_violations(exc.errors())
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": "validation_error",
                "message": "Request validation failed",
                "details": {"violations": violations},
            },
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "internal_error",
                "message": "An unexpected error occurred",
                "details": {},
            },
        )


def create_app() -> FastAPI:
    """
    Application factory.

    Creates and configures the FastAPI application.
    """
    app = FastAPI(
        title=settings.app_name,
        description="Multi-tenant time tracking with role-based permissions and timesheet approvals",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )

    register_exception_handlers(app)

    # Include routers
    from gogotime.routes import (
        action_codes,
        active_sessions,
        anonymization,
        auth,
        leave_requests,
        permissions,
        role_permissions,
        roles,
        timesheet_entries,
        timesheet_history,
        timesheets,
        users,
    )
    app.include_router(auth.router)
    app.include_router(permissions.router)
    app.include_router(roles.router)
    app.include_router(role_permissions.router)
    app.include_router(users.router)
    app.include_router(anonymization.router)
    app.include_router(leave_requests.router)
    app.include_router(timesheets.router)
    app.include_router(timesheet_entries.router)
    app.include_router(action_codes.router)
    app.include_router(action_codes.categories_router)
    app.include_router(active_sessions.router)
    app.include_router(timesheet_history.router)

    # Health check endpoint
    @app.get("/health", tags=["health"])
    def health_check():
        """Health check endpoint for monitoring."""
        try:
            check_connection()
            db_status = "healthy"
        except SQLAlchemyError as e:
            logger.error("Health check failed: %s", e)
            db_status = "unhealthy"

        return {
            "status": "ok",
            "app": settings.app_name,
            "version": __version__,
            "database": db_status,
        }

    return app


# Create the app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "gogotime.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
