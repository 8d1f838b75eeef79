"""
Tests del ejecutor acotado de llamadas a Supabase.
"""
import asyncio
import logging
import time

import pytest

from app.config import settings
from infrastructure.database import ejecutar_operacion_supabase

LOGGER = "infrastructure.database.ejecutor_supabase"


class TestEjecutarOperacionSupabase:
    @pytest.mark.asyncio
    async def test_returns_operation_result(self):
        result = await ejecutar_operacion_supabase(lambda: {"data": [1]}, label="farmers.select")

        assert result == {"data": [1]}

    @pytest.mark.asyncio
    async def test_operation_errors_propagate(self):
        def boom():
            raise RuntimeError("connection reset")

        with pytest.raises(RuntimeError, match="connection reset"):
            await ejecutar_operacion_supabase(boom, label="farmers.update")

    @pytest.mark.asyncio
    async def test_exhausted_budget_raises_timeout(self, caplog):
        with caplog.at_level(logging.WARNING, logger=LOGGER):
            with pytest.raises(asyncio.TimeoutError):
                await ejecutar_operacion_supabase(
                    lambda: time.sleep(0.3), timeout=0.05, label="profiles.update"
                )

        (record,) = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert record.op == "profiles.update"
        assert record.budget_s == 0.05

    @pytest.mark.asyncio
    async def test_slow_call_is_logged(self, caplog, monkeypatch):
        monkeypatch.setattr(settings, "perf_log_enabled", True)
        monkeypatch.setattr(settings, "slow_query_threshold_ms", 0)

        with caplog.at_level(logging.INFO, logger=LOGGER):
            await ejecutar_operacion_supabase(lambda: None, timeout=2, label="notifications.insert")

        (record,) = [r for r in caplog.records if r.name == LOGGER]
        assert record.op == "notifications.insert"
        assert record.budget_ms == 2000
        assert record.elapsed_ms >= 0

    @pytest.mark.asyncio
    async def test_fast_call_is_not_logged(self, caplog, monkeypatch):
        monkeypatch.setattr(settings, "slow_query_threshold_ms", 60_000)

        with caplog.at_level(logging.INFO, logger=LOGGER):
            await ejecutar_operacion_supabase(lambda: None, label="farmers.select")

        assert [r for r in caplog.records if r.name == LOGGER] == []
