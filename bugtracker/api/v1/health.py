"""Health check endpoint with database connectivity and revocation registry size."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bugtracker.core.config import settings
from bugtracker.core.database import check_db_connected, get_db
from bugtracker.core.revocation import RevocationRegistry, get_revocation_registry
from bugtracker.schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(
    db: Annotated[Session, Depends(get_db)],
    registry: Annotated[RevocationRegistry, Depends(get_revocation_registry)],
) -> HealthResponse:
    """
    Return service health status and database connectivity.
    Used by load balancers and monitoring.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"

    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        database=db_status,
        revoked_tokens=len(registry),
    )
