"""Health check endpoint (no auth)."""

from fastapi import APIRouter

from portal.infrastructure.firebase import get_document_client
from portal.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness, plus whether the document store was initialized."""
    database = "ok" if get_document_client() is not None else "unavailable"
    return HealthResponse(status="ok", database=database)
