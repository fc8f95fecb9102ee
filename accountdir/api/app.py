"""FastAPI application factory.

Creates and configures the FastAPI application with middleware,
exception handlers, and route registration.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from accountdir import __version__
from accountdir.api.dependencies import get_settings, reset_dependencies
from accountdir.api.middleware.context import RequestContextMiddleware
from accountdir.api.models.errors import ErrorBody, ErrorDetail, ErrorResponse
from accountdir.api.routes import register_routes
from accountdir.config.settings import Settings
from accountdir.errors import AccountDirectoryError, ErrorCode, ValidationError
from accountdir.observability.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Release the shared document store on shutdown."""
    yield
    await reset_dependencies()
    logger.info("app_shutdown")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use; loaded from config when omitted

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()

    setup_logging(
        level=settings.log_level,
        format=settings.observability.log_format,
        redact_pii=settings.observability.redact_pii,
    )

    app = FastAPI(
        title="Account Directory API",
        description="Account records addressed by internal id or CRM id",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=settings.api.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)

    _register_exception_handlers(app)
    register_routes(app)

    logger.info(
        "app_created",
        debug=settings.debug,
        store_backend=settings.storage.backend,
    )
    return app


def _error_response(status_code: int, body: ErrorBody) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=body).model_dump(mode="json", exclude_none=True),
    )


def _register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers.

    Args:
        app: FastAPI application
    """

    @app.exception_handler(AccountDirectoryError)
    async def directory_error_handler(
        request: Request, exc: AccountDirectoryError
    ) -> JSONResponse:
        """Render AccountDirectoryError and its subclasses."""
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            "api_error",
            error_code=exc.error_code.value,
            message=exc.message,
            path=request.url.path,
        )

        details = None
        if isinstance(exc, ValidationError) and exc.fields:
            details = [
                ErrorDetail(field=name, message=f"{name} is required")
                for name in exc.fields
            ]

        return _error_response(
            exc.status_code,
            ErrorBody(code=exc.error_code, message=exc.message, details=details),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Render FastAPI request parsing errors as 400."""
        logger.warning("request_validation_error", path=request.url.path)

        details = [
            ErrorDetail(
                field=".".join(str(loc) for loc in error["loc"]),
                message=error["msg"],
            )
            for error in exc.errors()
        ]
        return _error_response(
            400,
            ErrorBody(
                code=ErrorCode.INVALID_REQUEST,
                message="Request validation failed",
                details=details,
            ),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unexpected_error",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
        )
        return _error_response(
            500,
            ErrorBody(code=ErrorCode.INTERNAL_ERROR, message="An unexpected error occurred"),
        )
