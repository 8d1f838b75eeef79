"""
Resolución de identidad y control de rol.

Convierte la credencial del llamador en ``(auth_user_id, perfil)``:

- ``Authorization: Bearer <token>``: el token se valida contra el servicio
  de autenticación con el cliente público (anon key).
- ``x-user-id``: identidad declarada por el llamador, aceptada solo
  mientras la ventana de pre-verificación (``ALLOW_ASSERTED_IDENTITY``)
  esté habilitada.

Este control corre antes de cualquier paso de saga; las sagas no vuelven
a validar el rol.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Optional

from supabase import Client

from app.config import settings
from core.exceptions import (
    ForbiddenError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
)
from infrastructure.database import run_supabase
from models.profiles import ConsultantRecord, Profile, Role
from repositories.interfaces import IDataStore

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


@dataclass(frozen=True)
class ResolvedIdentity:
    """Identidad del servicio de autenticación y su perfil."""

    auth_user_id: str
    profile: Profile


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extrae el token de un header ``Authorization``; None si está vacío."""
    if not authorization:
        return None
    value = authorization.strip()
    scheme, _, token = value.partition(" ")
    if scheme.lower() == BEARER_SCHEME:
        value = token.strip()
    return value or None


class IdentityResolver:
    """
    Resuelve la identidad del llamador y su perfil.

    Args:
        auth_client: Cliente público de Supabase (para ``auth.get_user``)
        store: Almacén de datos para leer perfiles y registros de consultor
        allow_asserted_identity: Acepta ``x-user-id`` sin token; None usa
            la configuración global
    """

    def __init__(
        self,
        auth_client: Optional[Client],
        store: IDataStore,
        allow_asserted_identity: Optional[bool] = None,
    ):
        self._auth_client = auth_client
        self._store = store
        self._allow_asserted_identity = (
            settings.allow_asserted_identity
            if allow_asserted_identity is None
            else allow_asserted_identity
        )

    async def resolve(
        self,
        authorization: Optional[str],
        asserted_user_id: Optional[str] = None,
    ) -> ResolvedIdentity:
        """
        Resuelve ``(auth_user_id, perfil)``.

        Raises:
            UnauthorizedError: Credencial ausente o inválida
            NotFoundError: No existe perfil para la identidad
        """
        token = extract_bearer_token(authorization)
        asserted = (asserted_user_id or "").strip()

        if token:
            auth_user_id = await self._resolve_token(token)
        elif asserted and self._allow_asserted_identity:
            logger.info(f"🪪 Usando identidad declarada (x-user-id): {asserted}")
            auth_user_id = asserted
        else:
            raise UnauthorizedError("Missing authentication")

        profile = await self.get_profile(auth_user_id)
        return ResolvedIdentity(auth_user_id=auth_user_id, profile=profile)

    async def _resolve_token(self, token: str) -> str:
        if self._auth_client is None:
            raise InternalError(
                "Authentication service unavailable",
                details="SUPABASE_URL or SUPABASE_ANON_KEY not configured",
            )

        try:
            response: Any = await run_supabase(
                lambda: self._auth_client.auth.get_user(token),
                label="auth.get_user",
            )
        except asyncio.TimeoutError as exc:
            logger.error("⏱️ Timeout validando token con el servicio de autenticación")
            raise InternalError(
                "Authentication service timed out", details="auth.get_user timed out"
            ) from exc
        except Exception as exc:
            logger.warning(f"🚫 Token rechazado: {exc}")
            raise UnauthorizedError("Unauthorized") from exc

        user = getattr(response, "user", None)
        user_id = getattr(user, "id", None)
        if not user_id:
            raise UnauthorizedError("Unauthorized")
        return str(user_id)

    async def get_profile(self, auth_user_id: str) -> Profile:
        """Perfil anclado a ``auth_user_id``; NotFoundError si no existe."""
        try:
            row = await self._store.find_one("profiles", {"auth_user_id": auth_user_id})
        except NotFoundError as exc:
            logger.warning(f"⚠️ Perfil no encontrado para auth_user_id={auth_user_id}")
            raise NotFoundError("Profile not found") from exc
        return Profile.model_validate(row)

    async def get_consultant_record(self, profile_id: str) -> ConsultantRecord:
        """Registro de consultor del perfil; NotFoundError si no existe."""
        try:
            row = await self._store.find_one("consultants", {"profile_id": profile_id})
        except NotFoundError as exc:
            raise NotFoundError("Consultant record not found") from exc
        return ConsultantRecord.model_validate(row)


def require_role(profile: Profile, role: Role, message: Optional[str] = None) -> Profile:
    """
    Exige que el perfil tenga el rol indicado.

    Raises:
        ForbiddenError: Si el rol no coincide
    """
    if profile.role != role:
        logger.warning(
            f"⛔ Rol {profile.role.value} no autorizado (se requiere {role.value}) "
            f"para perfil {profile.id}"
        )
        raise ForbiddenError(message or f"Only {role.value}s can perform this action")
    return profile
