"""
Saga Pattern Implementation for multi-step store mutations.

The store only guarantees single-row atomicity, so operations that touch
several rows are run as a saga: an ordered list of commands, each with a
declared criticality.

- A best-effort step that fails is logged at WARNING and skipped.
- A critical step that fails stops the saga. Completed compensable steps
  are undone in reverse order, each bounded by the compensation timeout.
- If every compensation succeeds the caller gets ``RolledBackError``.
- If a compensation fails or times out, the saga logs at CRITICAL, records
  a manual-repair task and raises ``CompensationFailedError``.
- If there was nothing to compensate, the step's own ``ServiceError`` is
  re-raised unchanged (e.g. ``ConflictError`` when a conditional write
  loses the race). Any other exception becomes ``InternalError``.

Example:
    >>> from core.saga import MutationSaga
    >>> saga = (MutationSaga("farmer_assignment")
    ...     .add_command(AssignConsultantCommand(store, farmer_id, consultant_profile_id))
    ...     .add_command(ActivateProfileCommand(store, farmer_profile_id)))
    >>> result = await saga.execute()
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Protocol

from app.config import settings
from core.commands import Command, StepCriticality
from core.exceptions import (
    CompensationFailedError,
    InternalError,
    RolledBackError,
    ServiceError,
)
from infrastructure.logging import saga_step

logger = logging.getLogger(__name__)


class RepairRecorder(Protocol):
    async def record(
        self,
        saga: str,
        failed_step: str,
        failed_compensations: List[Dict[str, Any]],
        error: str,
    ) -> None:
        ...


class MutationSaga:
    """
    Orchestrates saga steps with criticality-aware compensation.

    Attributes:
        name: Saga name used in logs and repair records.
        commands: Commands to execute (in order).
        executed_commands: Commands that completed successfully.
        best_effort_failures: Names of best-effort commands that failed.
    """

    def __init__(
        self,
        name: str = "saga",
        step_timeout: Optional[float] = None,
        compensation_timeout: Optional[float] = None,
        repair_recorder: Optional[RepairRecorder] = None,
    ):
        """
        Args:
            name: Saga name for logs.
            step_timeout: Optional bound for each execute(); store calls are
                already bounded by the store timeout.
            compensation_timeout: Bound for each undo(); defaults to
                ``settings.compensation_timeout_seconds``.
            repair_recorder: Receives a record when a compensation fails.
        """
        self.name = name
        self.step_timeout = step_timeout
        self.compensation_timeout = (
            compensation_timeout
            if compensation_timeout is not None
            else settings.compensation_timeout_seconds
        )
        self.repair_recorder = repair_recorder
        self.commands: List[Command] = []
        self.executed_commands: List[Command] = []
        self.best_effort_failures: List[str] = []

        logger.debug(f"MutationSaga '{name}' initialized")

    def add_command(self, command: Command) -> "MutationSaga":
        """Add a command to the saga (fluent interface)."""
        self.commands.append(command)
        logger.debug(
            f"📋 Command added to saga {self.name}: {command.name} "
            f"({command.criticality.value}, total: {len(self.commands)})"
        )
        return self

    async def execute(self) -> Dict[str, Any]:
        """
        Execute all commands in order.

        Returns:
            Dict[str, Any]: Dictionary containing:
                - success (bool): True when every critical step succeeded
                - commands_executed (int): Number of commands that completed
                - best_effort_failures (List[str]): Skipped best-effort steps
                - results (Dict[str, Any]): execute() result per command name

        Raises:
            ServiceError: The critical step's own error when nothing needed
                compensation.
            InternalError: A non-service failure with nothing to compensate.
            RolledBackError: A critical step failed and was compensated.
            CompensationFailedError: A compensation failed.
        """
        self.executed_commands = []
        self.best_effort_failures = []
        results: Dict[str, Any] = {}
        total = len(self.commands)

        logger.info(f"🚀 Starting saga {self.name} with {total} commands")

        for index, command in enumerate(self.commands):
            logger.info(f"⚙️ Executing command {index + 1}/{total}: {command.name}")
            try:
                result = await self._run_step(command)
            except Exception as exc:
                if command.criticality is StepCriticality.BEST_EFFORT:
                    self.best_effort_failures.append(command.name)
                    logger.warning(
                        f"⚠️ Best-effort step {command.name} failed in saga "
                        f"{self.name}: {exc}",
                        extra={
                            "saga": self.name,
                            "step": command.name,
                            **command.log_context(),
                        },
                    )
                    continue
                await self._abort(index, command, exc)

            self.executed_commands.append(command)
            results[command.name] = result
            logger.info(f"✅ Command {index + 1}/{total} completed: {command.name}")

        logger.info(
            f"🎉 Saga {self.name} completed "
            f"({len(self.executed_commands)}/{total} commands executed)"
        )
        return {
            "success": True,
            "commands_executed": len(self.executed_commands),
            "best_effort_failures": list(self.best_effort_failures),
            "results": results,
        }

    async def _run_step(self, command: Command) -> Dict[str, Any]:
        with saga_step(self.name, command.name):
            if self.step_timeout is None:
                return await command.execute()
            return await asyncio.wait_for(command.execute(), timeout=self.step_timeout)

    async def _abort(self, index: int, command: Command, exc: Exception) -> None:
        """Apply the critical-failure policy; always raises."""
        completed = [c.name for c in self.executed_commands]
        logger.error(
            f"❌ Saga {self.name} failed at command {index + 1}/{len(self.commands)}: "
            f"{command.name} - {exc}",
            extra={"saga": self.name, "step": command.name, **command.log_context()},
        )

        to_compensate = [c for c in self.executed_commands if c.compensable]
        if not to_compensate:
            if isinstance(exc, ServiceError):
                raise exc
            raise InternalError(
                command.failure_message or f"Saga step {command.name} failed",
                details=str(exc) or exc.__class__.__name__,
            ) from exc

        failed_compensations = await self._rollback(to_compensate)
        message = command.failure_message or f"Saga {self.name} failed"

        if failed_compensations:
            logger.critical(
                f"🚨 Saga {self.name} left inconsistent state: compensation failed "
                f"for {[f['step'] for f in failed_compensations]}",
                extra={
                    "saga": self.name,
                    "failed_step": command.name,
                    "failed_compensations": failed_compensations,
                },
            )
            await self._record_repair(command, failed_compensations, exc)
            raise CompensationFailedError(
                f"{message}. Rollback did not complete; manual repair is required.",
                completed_commands=completed,
                failed_at=index,
                failed_compensations=[f["step"] for f in failed_compensations],
                details=str(exc),
            ) from exc

        raise RolledBackError(
            f"{message}. Changes have been rolled back.",
            completed_commands=completed,
            failed_at=index,
            details=str(exc),
        ) from exc

    async def _rollback(self, commands: List[Command]) -> List[Dict[str, Any]]:
        """
        Undo the given commands in reverse order.

        Every compensation is attempted even if an earlier one fails.

        Returns:
            One entry per failed compensation (step name, error, log context).
        """
        logger.info(
            f"🔄 Rolling back {len(commands)} command(s) of saga {self.name}"
        )
        failed: List[Dict[str, Any]] = []

        for command in reversed(commands):
            try:
                logger.info(f"↩️ Rolling back command: {command.name}")
                with saga_step(self.name, command.name, phase="undo"):
                    await asyncio.wait_for(
                        command.undo(), timeout=self.compensation_timeout
                    )
                logger.info(f"✅ Rollback successful for command: {command.name}")
            except asyncio.TimeoutError:
                failed.append(
                    {
                        "step": command.name,
                        "error": f"compensation timed out after {self.compensation_timeout}s",
                        "context": command.log_context(),
                    }
                )
            except Exception as undo_error:
                failed.append(
                    {
                        "step": command.name,
                        "error": str(undo_error) or undo_error.__class__.__name__,
                        "context": command.log_context(),
                    }
                )

        logger.info(f"🏁 Rollback process completed for saga {self.name}")
        return failed

    async def _record_repair(
        self,
        command: Command,
        failed_compensations: List[Dict[str, Any]],
        exc: Exception,
    ) -> None:
        if self.repair_recorder is None:
            return
        try:
            await self.repair_recorder.record(
                saga=self.name,
                failed_step=command.name,
                failed_compensations=failed_compensations,
                error=str(exc),
            )
        except Exception as record_error:
            logger.critical(
                f"🚨 Could not record repair task for saga {self.name}: {record_error}",
                extra={
                    "saga": self.name,
                    "failed_compensations": failed_compensations,
                },
            )

    def get_status(self) -> Dict[str, Any]:
        """Diagnostic snapshot of the saga."""
        return {
            "total_commands": len(self.commands),
            "executed_commands": len(self.executed_commands),
            "pending_commands": len(self.commands)
            - len(self.executed_commands)
            - len(self.best_effort_failures),
            "command_names": [c.name for c in self.commands],
            "executed_names": [c.name for c in self.executed_commands],
            "best_effort_failures": list(self.best_effort_failures),
        }
