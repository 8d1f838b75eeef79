"""
Interfaz del almacén de datos usado por las sagas.

Define las operaciones abstractas de las que dependen las sagas y el
despachador de notificaciones, siguiendo el principio de Dependency
Inversion (DIP). La implementación real es ``SupabaseDataStore``; los
tests usan un almacén en memoria.

Convención de filtros (``filters`` / ``where_fields``):
    - valor ``None``          -> ``columna IS NULL``
    - valor ``list``/``tuple`` -> ``columna IN (...)``
    - cualquier otro valor    -> ``columna = valor``
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class QueryPage:
    """
    Resultado paginado de ``find_many``.

    Attributes:
        rows: Filas de la página solicitada
        total: Total de filas que cumplen los filtros (sin paginar), si se pidió
    """
    rows: List[Dict[str, Any]] = field(default_factory=list)
    total: Optional[int] = None


class IDataStore(ABC):
    """
    Interfaz para el almacén relacional.

    El almacén solo garantiza atomicidad por fila. Las sagas construyen
    la coordinación entre tablas sobre estas operaciones.
    """

    @abstractmethod
    async def conditional_update(
        self,
        table: str,
        record_id: str,
        set_fields: Dict[str, Any],
        where_fields: Dict[str, Any],
    ) -> int:
        """
        Actualiza una fila solo si ``where_fields`` se cumple en el momento de escribir.

        Es una única llamada atómica (compare-and-swap); nunca se emula
        como lectura + comprobación + escritura.

        Args:
            table: Tabla destino
            record_id: Valor de la columna ``id``
            set_fields: Campos a escribir
            where_fields: Guardas adicionales

        Returns:
            Número de filas afectadas (0 si la guarda no se cumplió)

        Raises:
            RepositoryError: Si falla la escritura
        """

    @abstractmethod
    async def update(
        self,
        table: str,
        record_id: Any,
        set_fields: Dict[str, Any],
        key: str = "id",
    ) -> int:
        """
        Actualiza sin condiciones las filas con ``key = record_id``.

        Returns:
            Número de filas afectadas

        Raises:
            RepositoryError: Si falla la escritura
        """

    @abstractmethod
    async def update_where(
        self,
        table: str,
        filters: Dict[str, Any],
        set_fields: Dict[str, Any],
    ) -> int:
        """
        Actualiza todas las filas que cumplen ``filters``.

        Returns:
            Número de filas afectadas
        """

    @abstractmethod
    async def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        """
        Inserta una fila.

        Returns:
            La fila insertada (con id y timestamps si el almacén los genera)

        Raises:
            RepositoryError: Si falla la inserción
        """

    @abstractmethod
    async def insert_many(
        self, table: str, rows: List[Dict[str, Any]]
    ) -> List[Dict[str, Any]]:
        """
        Inserta varias filas en una única llamada (todo o nada).

        Raises:
            RepositoryError: Si falla la inserción
        """

    @abstractmethod
    async def find_one(
        self,
        table: str,
        filters: Dict[str, Any],
        columns: str = "*",
    ) -> Dict[str, Any]:
        """
        Busca una fila.

        Raises:
            NotFoundError: Si ninguna fila cumple los filtros
            RepositoryError: Si falla la consulta
        """

    @abstractmethod
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
        """
        Busca varias filas con filtros, solapamiento de arrays y paginación.

        Args:
            overlaps: columna -> valores; la fila cumple si su array comparte
                      al menos un valor
            with_count: Si True, ``QueryPage.total`` contiene el total sin paginar
        """

    @abstractmethod
    async def delete(self, table: str, record_id: Any, key: str = "id") -> int:
        """Elimina filas con ``key = record_id``; retorna filas afectadas."""

    @abstractmethod
    async def atomic_increment(self, procedure: str, params: Dict[str, Any]) -> Any:
        """
        Ejecuta un procedimiento almacenado de incremento en el servidor.

        Nunca se emula como lectura + escritura desde la aplicación.

        Raises:
            RepositoryError: Si el procedimiento falla
        """
