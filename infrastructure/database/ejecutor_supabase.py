"""
Ejecución acotada de llamadas al cliente síncrono de Supabase.

Cada paso de saga hace como mucho una llamada al almacén, así que el
timeout de esa llamada es el presupuesto del paso: un paso que lo agota
cuenta como fallido y se aplica su criticidad (omitir si es best-effort,
compensar si es crítico).
"""

import asyncio
import logging
from time import perf_counter
from typing import Any, Callable, Optional

from app.config import settings

logger = logging.getLogger(__name__)


async def ejecutar_operacion_supabase(
    op: Callable[[], Any],
    timeout: Optional[float] = None,
    label: str = "supabase_op",
) -> Any:
    """
    Corre ``op`` en el thread pool con un límite de tiempo.

    Args:
        op: Llamada sin argumentos (normalmente ``query.execute``)
        timeout: Segundos; None usa ``SUPABASE_TIMEOUT_SECONDS``
        label: ``tabla.operacion`` para los logs

    Raises:
        asyncio.TimeoutError: Si se agota el presupuesto del paso
    """
    budget = settings.supabase_timeout_seconds if timeout is None else timeout
    loop = asyncio.get_running_loop()
    start = perf_counter()

    try:
        return await asyncio.wait_for(loop.run_in_executor(None, op), timeout=budget)
    except asyncio.TimeoutError:
        logger.warning(
            f"⏱️ {label} superó el presupuesto de {budget}s",
            extra={"op": label, "budget_s": budget},
        )
        raise
    finally:
        elapsed_ms = (perf_counter() - start) * 1000
        if settings.perf_log_enabled and elapsed_ms >= settings.slow_query_threshold_ms:
            logger.info(
                f"🐢 {label} lenta: {elapsed_ms:.0f}ms",
                extra={
                    "op": label,
                    "elapsed_ms": round(elapsed_ms, 2),
                    "budget_ms": budget * 1000,
                },
            )
