"""
Registro de tareas de reparación manual.

Cuando la compensación de una saga falla, el estado persistido queda
inconsistente. Además del log CRITICAL, se deja una fila en
``saga_repair_tasks`` para que un operador la atienda.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from repositories.interfaces import IDataStore

logger = logging.getLogger(__name__)

REPAIR_TASKS_TABLE = "saga_repair_tasks"


class RepairTaskRecorder:
    """Persiste tareas de reparación en el almacén."""

    def __init__(self, store: IDataStore):
        self._store = store

    async def record(
        self,
        saga: str,
        failed_step: str,
        failed_compensations: List[Dict[str, Any]],
        error: str,
    ) -> None:
        row = {
            "saga": saga,
            "failed_step": failed_step,
            "failed_compensations": failed_compensations,
            "error": error,
            "status": "open",
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        await self._store.insert(REPAIR_TASKS_TABLE, row)
        logger.warning(f"🛠️ Tarea de reparación registrada para saga {saga} ({failed_step})")
