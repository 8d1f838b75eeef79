"""
Listado de agricultores sin asignar para consultores.

La consulta filtra en el almacén por ``consultant_id IS NULL``, distrito,
estado y cultivos (solapamiento de arrays). El estado del perfil (pending o
active) y la búsqueda libre se aplican sobre la página ya recuperada, porque
PostgREST no filtra sobre la relación embebida ``profiles``.
"""

import logging
import math
from typing import Any, Dict, List, Optional

from models.profiles import ProfileStatus
from models.schemas import Pagination
from repositories.interfaces import IDataStore

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 50
LISTED_STATUSES = (ProfileStatus.PENDING.value, ProfileStatus.ACTIVE.value)
FARMER_COLUMNS = (
    "id, profile_id, farm_name, district, state, land_size_acres, current_crops, "
    "created_at, updated_at, "
    "profiles:profile_id (id, full_name, email, phone, avatar_url, status)"
)


def normalize_pagination(page: Optional[int], limit: Optional[int]) -> Dict[str, int]:
    """Acota ``page >= 1`` y ``1 <= limit <= 50`` (20 por defecto)."""
    page = max(1, page or 1)
    limit = min(MAX_PAGE_SIZE, max(1, limit or DEFAULT_PAGE_SIZE))
    return {"page": page, "limit": limit, "offset": (page - 1) * limit}


def parse_crops(crops: Optional[str]) -> List[str]:
    """Convierte ``"maiz, arroz"`` en ``["maiz", "arroz"]``."""
    if not crops:
        return []
    return [crop.strip() for crop in crops.split(",") if crop.strip()]


def _matches_search(farmer: Dict[str, Any], profile: Dict[str, Any], term: str) -> bool:
    haystack = (
        profile.get("full_name"),
        profile.get("email"),
        profile.get("phone"),
        farmer.get("district"),
        farmer.get("state"),
    )
    return any(value and term in str(value).lower() for value in haystack)


class UnassignedFarmerService:
    """Consulta de agricultores disponibles para vincular."""

    def __init__(self, store: IDataStore):
        self._store = store

    async def list_unassigned(
        self,
        page: Optional[int] = 1,
        limit: Optional[int] = DEFAULT_PAGE_SIZE,
        search: Optional[str] = None,
        district: Optional[str] = None,
        state: Optional[str] = None,
        crops: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Retorna ``{"farmers": [...], "pagination": {...}}``.

        ``pagination.total`` es el total que reporta el almacén para los
        filtros de columna, antes del filtro por estado y búsqueda.
        """
        paging = normalize_pagination(page, limit)
        filters: Dict[str, Any] = {"consultant_id": None}
        if district and district.strip():
            filters["district"] = district.strip()
        if state and state.strip():
            filters["state"] = state.strip()

        crop_list = parse_crops(crops)
        result = await self._store.find_many(
            "farmers",
            filters=filters,
            columns=FARMER_COLUMNS,
            overlaps={"current_crops": crop_list} if crop_list else None,
            order_by="created_at",
            descending=True,
            limit=paging["limit"],
            offset=paging["offset"],
            with_count=True,
        )

        term = (search or "").strip().lower()
        farmers = []
        for farmer in result.rows:
            profile = farmer.get("profiles") or {}
            if profile.get("status") not in LISTED_STATUSES:
                continue
            if term and not _matches_search(farmer, profile, term):
                continue
            farmers.append(farmer)

        total = result.total or 0
        pagination = Pagination(
            page=paging["page"],
            limit=paging["limit"],
            total=total,
            total_pages=math.ceil(total / paging["limit"]),
        )
        logger.debug(
            f"🔎 {len(farmers)} agricultores sin asignar (página {paging['page']}, "
            f"total {total})"
        )
        return {
            "farmers": farmers,
            "pagination": pagination.model_dump(by_alias=True),
        }
