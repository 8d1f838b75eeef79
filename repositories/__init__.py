"""
Repository Pattern para el almacén de datos.
"""
from repositories.interfaces import IDataStore, QueryPage
from repositories.supabase_store import SupabaseDataStore

__all__ = [
    "IDataStore",
    "QueryPage",
    "SupabaseDataStore",
]
