"""
Health check endpoint.
"""
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from supabase import Client

from app.config import settings
from app.dependencies import get_supabase
from infrastructure.database import run_supabase
from models.schemas import HealthResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health", response_model=HealthResponse)
async def health_check(
    supabase_client: Optional[Client] = Depends(get_supabase),
) -> HealthResponse:
    """
    Health check endpoint.

    Verifica el estado del servicio y la conexión a Supabase.
    """
    supabase_status = "not_configured"
    if supabase_client:
        try:
            await run_supabase(
                lambda: supabase_client.table("profiles").select("id").limit(1).execute(),
                label="health.profiles",
            )
            supabase_status = "connected"
        except Exception as exc:
            logger.warning(f"⚠️ Health check: Supabase no disponible: {exc}")
            supabase_status = "error"

    return HealthResponse(
        status="healthy",
        service=settings.service_name,
        timestamp=datetime.now().isoformat(),
        supabase=supabase_status,
    )
