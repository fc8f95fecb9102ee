"""Health check endpoint."""

from datetime import UTC, datetime

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from accountdir import __version__
from accountdir.api.dependencies import DocumentStoreDep, SettingsDep
from accountdir.api.models.accounts import HealthResponse
from accountdir.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: SettingsDep, store: DocumentStoreDep) -> JSONResponse:
    """Report whether the document store is reachable.

    Responds 503 when the store health check fails.
    """
    healthy = await store.health_check()
    response = HealthResponse(
        status="healthy" if healthy else "unhealthy",
        version=__version__,
        store_backend=settings.storage.backend,
        timestamp=datetime.now(UTC),
    )
    logger.debug("health_check_completed", status=response.status)
    return JSONResponse(
        status_code=200 if healthy else 503,
        content=response.model_dump(mode="json"),
    )
