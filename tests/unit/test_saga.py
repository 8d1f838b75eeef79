"""
Tests unitarios para la saga de mutaciones.
"""
import asyncio
import logging
from typing import Any, Dict, List
from unittest.mock import AsyncMock

import pytest

from core.commands import Command, StepCriticality
from core.exceptions import (
    CompensationFailedError,
    ConflictError,
    InternalError,
    RolledBackError,
)
from core.saga import MutationSaga


class RecordingCommand(Command):
    """Comando de prueba que registra execute/undo en una lista compartida."""

    def __init__(
        self,
        label: str,
        log: List[str],
        criticality: StepCriticality = StepCriticality.CRITICAL,
        compensable: bool = False,
        fail_with: Exception = None,
        undo_fails: bool = False,
        undo_delay: float = 0,
    ):
        self.label = label
        self.log = log
        self.criticality = criticality
        self.compensable = compensable
        self.fail_with = fail_with
        self.undo_fails = undo_fails
        self.undo_delay = undo_delay

    @property
    def name(self) -> str:
        return self.label

    async def execute(self) -> Dict[str, Any]:
        self.log.append(f"execute_{self.label}")
        if self.fail_with is not None:
            raise self.fail_with
        return {"label": self.label}

    async def undo(self) -> None:
        if self.undo_delay:
            await asyncio.sleep(self.undo_delay)
        self.log.append(f"undo_{self.label}")
        if self.undo_fails:
            raise RuntimeError(f"undo {self.label} failed")


class TestMutationSagaBuilder:
    def test_initialization(self):
        """Debe inicializar una saga vacía."""
        saga = MutationSaga("test")

        assert saga.commands == []
        assert saga.executed_commands == []

    def test_add_command_fluent(self):
        """add_command retorna la saga para encadenar."""
        log: List[str] = []
        saga = MutationSaga("test")

        result = saga.add_command(RecordingCommand("a", log)).add_command(
            RecordingCommand("b", log)
        )

        assert result is saga
        assert saga.get_status()["command_names"] == ["a", "b"]
        assert saga.get_status()["pending_commands"] == 2


class TestMutationSagaExecution:
    @pytest.mark.asyncio
    async def test_execute_success(self):
        """Ejecuta todos los comandos en orden."""
        log: List[str] = []
        saga = MutationSaga("test").add_command(RecordingCommand("a", log)).add_command(
            RecordingCommand("b", log)
        )

        result = await saga.execute()

        assert result["success"] is True
        assert result["commands_executed"] == 2
        assert result["results"]["b"] == {"label": "b"}
        assert log == ["execute_a", "execute_b"]

    @pytest.mark.asyncio
    async def test_best_effort_failure_does_not_stop_saga(self, caplog):
        """Un paso best-effort fallido se registra y la saga continúa."""
        log: List[str] = []
        saga = (
            MutationSaga("test")
            .add_command(RecordingCommand("a", log, compensable=True))
            .add_command(
                RecordingCommand(
                    "b",
                    log,
                    criticality=StepCriticality.BEST_EFFORT,
                    fail_with=RuntimeError("boom"),
                )
            )
            .add_command(RecordingCommand("c", log))
        )

        with caplog.at_level(logging.WARNING, logger="core.saga"):
            result = await saga.execute()

        assert result["success"] is True
        assert result["best_effort_failures"] == ["b"]
        assert log == ["execute_a", "execute_b", "execute_c"]
        assert any("Best-effort step b failed" in r.message for r in caplog.records)

    @pytest.mark.asyncio
    async def test_critical_failure_without_compensation_reraises_service_error(self):
        """Sin pasos que compensar se propaga el error del paso tal cual."""
        log: List[str] = []
        conflict = ConflictError("taken", code="already_assigned")
        saga = MutationSaga("test").add_command(RecordingCommand("a", log, fail_with=conflict))

        with pytest.raises(ConflictError) as exc_info:
            await saga.execute()

        assert exc_info.value is conflict
        assert log == ["execute_a"]

    @pytest.mark.asyncio
    async def test_unexpected_error_becomes_internal_error(self):
        saga = MutationSaga("test").add_command(
            RecordingCommand("a", [], fail_with=ValueError("bad data"))
        )

        with pytest.raises(InternalError) as exc_info:
            await saga.execute()

        assert exc_info.value.details == "bad data"
        assert not isinstance(exc_info.value, RolledBackError)

    @pytest.mark.asyncio
    async def test_rollback_in_reverse_order(self):
        """Un fallo crítico deshace los pasos compensables en orden inverso."""
        log: List[str] = []
        saga = (
            MutationSaga("test")
            .add_command(RecordingCommand("a", log, compensable=True))
            .add_command(RecordingCommand("b", log))
            .add_command(RecordingCommand("c", log, compensable=True))
            .add_command(RecordingCommand("d", log, fail_with=RuntimeError("d failed")))
        )

        with pytest.raises(RolledBackError) as exc_info:
            await saga.execute()

        assert log == [
            "execute_a",
            "execute_b",
            "execute_c",
            "execute_d",
            "undo_c",
            "undo_a",
        ]
        assert exc_info.value.completed_commands == ["a", "b", "c"]
        assert exc_info.value.failed_at == 3
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_compensation_failure_is_reported_and_recorded(self, caplog):
        """Si la compensación falla se registra en CRITICAL y se crea una tarea de reparación."""
        log: List[str] = []
        recorder = AsyncMock()
        saga = (
            MutationSaga("test", repair_recorder=recorder)
            .add_command(RecordingCommand("a", log, compensable=True))
            .add_command(RecordingCommand("b", log, compensable=True, undo_fails=True))
            .add_command(RecordingCommand("c", log, fail_with=RuntimeError("c failed")))
        )

        with caplog.at_level(logging.CRITICAL, logger="core.saga"):
            with pytest.raises(CompensationFailedError) as exc_info:
                await saga.execute()

        # Se intentan todas las compensaciones aunque una falle
        assert log[-2:] == ["undo_b", "undo_a"]
        assert exc_info.value.failed_compensations == ["b"]
        assert any(r.levelno == logging.CRITICAL for r in caplog.records)

        recorder.record.assert_awaited_once()
        kwargs = recorder.record.await_args.kwargs
        assert kwargs["saga"] == "test"
        assert kwargs["failed_step"] == "c"
        assert kwargs["failed_compensations"][0]["step"] == "b"

    @pytest.mark.asyncio
    async def test_compensation_timeout_counts_as_failure(self):
        log: List[str] = []
        saga = (
            MutationSaga("test", compensation_timeout=0.01)
            .add_command(RecordingCommand("a", log, compensable=True, undo_delay=1))
            .add_command(RecordingCommand("b", log, fail_with=RuntimeError("b failed")))
        )

        with pytest.raises(CompensationFailedError) as exc_info:
            await saga.execute()

        assert exc_info.value.failed_compensations == ["a"]
        assert "undo_a" not in log

    @pytest.mark.asyncio
    async def test_repair_recorder_failure_still_raises_compensation_error(self):
        recorder = AsyncMock()
        recorder.record.side_effect = RuntimeError("store down")
        saga = (
            MutationSaga("test", repair_recorder=recorder)
            .add_command(RecordingCommand("a", [], compensable=True, undo_fails=True))
            .add_command(RecordingCommand("b", [], fail_with=RuntimeError("b failed")))
        )

        with pytest.raises(CompensationFailedError):
            await saga.execute()

    @pytest.mark.asyncio
    async def test_step_timeout_fails_critical_step(self):
        class SlowCommand(Command):
            async def execute(self) -> Dict[str, Any]:
                await asyncio.sleep(1)
                return {}

        saga = MutationSaga("test", step_timeout=0.01).add_command(SlowCommand())

        with pytest.raises(InternalError):
            await saga.execute()
