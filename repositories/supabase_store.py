"""
Implementación de ``IDataStore`` con Supabase (PostgREST).

Principios SOLID aplicados:
- SRP (Single Responsibility): Solo se encarga del acceso a datos
- DIP (Dependency Inversion): Implementa la interfaz IDataStore
- OCP (Open/Closed): Abierto para extensión (mocks, otros almacenes)

Todas las operaciones usan el cliente con service role y se ejecutan con
``run_supabase`` (thread pool + timeout). Cualquier fallo del cliente,
incluido el timeout, se traduce a ``RepositoryError``.
"""
import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional

from supabase import Client

from core.exceptions import NotFoundError, RepositoryError
from infrastructure.database import run_supabase
from repositories.interfaces import IDataStore, QueryPage

logger = logging.getLogger(__name__)


def _apply_filters(query, filters: Optional[Dict[str, Any]]):
    """Aplica la convención de filtros de IDataStore a un query builder."""
    for column, value in (filters or {}).items():
        if value is None:
            query = query.is_(column, "null")
        elif isinstance(value, (list, tuple)):
            query = query.in_(column, list(value))
        else:
            query = query.eq(column, value)
    return query


class SupabaseDataStore(IDataStore):
    """
    Almacén de datos sobre el cliente admin de Supabase.

    Características:
    - Envuelve operaciones de Supabase con run_supabase para async
    - ``conditional_update`` se traduce a ``UPDATE ... WHERE guarda`` y
      cuenta las filas devueltas por PostgREST (return=representation)
    - ``atomic_increment`` llama a un RPC del servidor
    """

    def __init__(self, supabase_client: Client, timeout: Optional[float] = None):
        """
        Args:
            supabase_client: Cliente de Supabase con service role
            timeout: Timeout por operación; None usa la configuración global
        """
        self._supabase = supabase_client
        self._timeout = timeout

    async def _execute(
        self, op: Callable, label: str, timeout: Optional[float] = None
    ) -> Any:
        try:
            return await run_supabase(
                op, timeout=timeout or self._timeout, label=label
            )
        except asyncio.TimeoutError as exc:
            logger.error(f"⏱️ Timeout en operación Supabase {label}")
            raise RepositoryError(
                f"{label} timed out", details="Database operation timed out"
            ) from exc
        except Exception as exc:
            logger.error(f"❌ Error en operación Supabase {label}: {exc}")
            raise RepositoryError(f"{label} failed", details=str(exc)) from exc

    @staticmethod
    def _rows(result: Any) -> List[Dict[str, Any]]:
        data = getattr(result, "data", None)
        if data is None:
            return []
        if isinstance(data, list):
            return data
        return [data]

    # ========================================================================
    # Escrituras
    # ========================================================================

    async def conditional_update(
        self,
        table: str,
        record_id: str,
        set_fields: Dict[str, Any],
        where_fields: Dict[str, Any],
    ) -> int:
        def op():
            query = self._supabase.table(table).update(set_fields).eq("id", record_id)
            return _apply_filters(query, where_fields).execute()

        result = await self._execute(op, label=f"{table}.conditional_update")
        affected = len(self._rows(result))
        logger.debug(
            f"🔒 conditional_update {table}/{record_id}: {affected} fila(s) afectada(s)"
        )
        return affected

    async def update(
        self,
        table: str,
        record_id: Any,
        set_fields: Dict[str, Any],
        key: str = "id",
    ) -> int:
        result = await self._execute(
            lambda: self._supabase.table(table)
            .update(set_fields)
            .eq(key, record_id)
            .execute(),
            label=f"{table}.update",
        )
        return len(self._rows(result))

    async def update_where(
        self,
        table: str,
        filters: Dict[str, Any],
        set_fields: Dict[str, Any],
    ) -> int:
        def op():
            query = self._supabase.table(table).update(set_fields)
            return _apply_filters(query, filters).execute()

        result = await self._execute(op, label=f"{table}.update_where")
        return len(self._rows(result))

    async def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        result = await self._execute(
            lambda: self._supabase.table(table).insert(row).execute(),
            label=f"{table}.insert",
        )
        rows = self._rows(result)
        return rows[0] if rows else dict(row)

    async def insert_many(
        self, table: str, rows: List[Dict[str, Any]]
    ) -> List[Dict[str, Any]]:
        result = await self._execute(
            lambda: self._supabase.table(table).insert(rows).execute(),
            label=f"{table}.insert_many",
        )
        return self._rows(result)

    async def delete(self, table: str, record_id: Any, key: str = "id") -> int:
        result = await self._execute(
            lambda: self._supabase.table(table).delete().eq(key, record_id).execute(),
            label=f"{table}.delete",
        )
        return len(self._rows(result))

    async def atomic_increment(self, procedure: str, params: Dict[str, Any]) -> Any:
        result = await self._execute(
            lambda: self._supabase.rpc(procedure, params).execute(),
            label=f"rpc.{procedure}",
        )
        return getattr(result, "data", None)

    # ========================================================================
    # Lecturas
    # ========================================================================

    async def find_one(
        self,
        table: str,
        filters: Dict[str, Any],
        columns: str = "*",
    ) -> Dict[str, Any]:
        def op():
            query = self._supabase.table(table).select(columns)
            return _apply_filters(query, filters).limit(1).execute()

        result = await self._execute(op, label=f"{table}.find_one")
        rows = self._rows(result)
        if not rows:
            logger.debug(f"🔍 Sin resultados en {table} para {filters}")
            raise NotFoundError(f"{table} record not found")
        return rows[0]

    async def find_many(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        columns: str = "*",
        overlaps: Optional[Dict[str, List[Any]]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        offset: int = 0,
        with_count: bool = False,
    ) -> QueryPage:
        def op():
            query = self._supabase.table(table).select(
                columns, count="exact" if with_count else None
            )
            query = _apply_filters(query, filters)
            for column, values in (overlaps or {}).items():
                query = query.ov(column, values)
            if order_by:
                query = query.order(order_by, desc=descending)
            if limit is not None:
                query = query.range(offset, offset + limit - 1)
            return query.execute()

        result = await self._execute(op, label=f"{table}.find_many")
        return QueryPage(
            rows=self._rows(result),
            total=getattr(result, "count", None) if with_count else None,
        )
