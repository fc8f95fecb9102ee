"""API route registration."""

from fastapi import FastAPI

from accountdir.observability.logging import get_logger

logger = get_logger(__name__)


def register_routes(app: FastAPI) -> None:
    """Register all routes with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    from accountdir.api.routes.accounts import router as accounts_router
    from accountdir.api.routes.health import router as health_router

    app.include_router(accounts_router, tags=["Accounts"])
    app.include_router(health_router, tags=["Health"])

    logger.debug("routes_registered", routes=["accounts", "health"])
