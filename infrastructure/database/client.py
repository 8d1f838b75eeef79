"""
Clientes globales de Supabase para compartir entre módulos.

El servicio trabaja con dos niveles de credencial:

- Cliente público (anon key): sujeto a las políticas RLS. Se usa para
  resolver tokens bearer a identidades de usuario.
- Cliente admin (service role key): ignora RLS. Se usa en las escrituras
  de las sagas y en el despacho de notificaciones.

El cliente admin NUNCA debe exponerse fuera del backend.
"""

import logging
from typing import Optional

from supabase import Client, create_client

from app.config import settings

logger = logging.getLogger(__name__)

_supabase_admin_client: Optional[Client] = None
_supabase_public_client: Optional[Client] = None

def get_supabase_admin_client() -> Optional[Client]:
    """
    Obtiene el cliente de Supabase con service role (singleton).

    Returns:
        Cliente de Supabase o None si faltan credenciales
    """
    global _supabase_admin_client
    if _supabase_admin_client is None:
        if settings.supabase_url and settings.supabase_service_key:
            _supabase_admin_client = create_client(
                settings.supabase_url,
                settings.supabase_service_key,
            )
            logger.info("✅ Cliente Supabase admin inicializado")
        else:
            logger.warning("⚠️ SUPABASE_URL o SUPABASE_SERVICE_KEY no configurados")
    return _supabase_admin_client

def get_supabase_public_client() -> Optional[Client]:
    """
    Obtiene el cliente de Supabase con anon key (singleton).

    Returns:
        Cliente de Supabase o None si faltan credenciales
    """
    global _supabase_public_client
    if _supabase_public_client is None:
        if settings.supabase_url and settings.supabase_anon_key:
            _supabase_public_client = create_client(
                settings.supabase_url,
                settings.supabase_anon_key,
            )
        else:
            logger.warning("⚠️ SUPABASE_URL o SUPABASE_ANON_KEY no configurados")
    return _supabase_public_client

