"""
Utilidades para operaciones de base de datos con Supabase.
"""

from .client import get_supabase_admin_client, get_supabase_public_client
from .ejecutor_supabase import ejecutar_operacion_supabase

# Alias corto usado por repositorios, servicios y health check
run_supabase = ejecutar_operacion_supabase

__all__ = [
    "ejecutar_operacion_supabase",
    "run_supabase",
    "get_supabase_admin_client",
    "get_supabase_public_client",
]
