"""
Command Pattern Implementation for multi-step store mutations.

This module defines the Command interface and the concrete commands used by
the assignment and registration sagas. Each command implements execute() and,
when it is compensable, undo(). Every command declares its criticality:

- CRITICAL: a failure aborts the saga and compensates earlier steps.
- BEST_EFFORT: a failure is logged with enough context to replay it by hand
  and the saga continues.

Unlike a best-effort rollback, undo() must raise when the compensating write
fails, so the saga can report the inconsistency distinctly.

Example:
    >>> from core.commands import AssignConsultantCommand
    >>> command = AssignConsultantCommand(store, farmer_id, consultant_profile_id)
    >>> result = await command.execute()
    >>> await command.undo()  # Rollback if a later critical step fails
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, TYPE_CHECKING
import logging

from core.exceptions import ConflictError, InternalError, NotFoundError, RepositoryError
from models.notifications import NotificationKind
from models.profiles import ProfileStatus, ReviewRequest
from services.document_metadata import build_submitted_documents
from services.notification_service import notify_farmer_consultant_link

if TYPE_CHECKING:
    from repositories.interfaces import IDataStore
    from services.notification_service import NotificationService

logger = logging.getLogger(__name__)

INCREMENT_FARMER_COUNT_RPC = "increment_consultant_farmer_count"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class StepCriticality(str, Enum):
    """How a step failure affects the saga outcome."""

    CRITICAL = "critical"
    BEST_EFFORT = "best_effort"


class Command(ABC):
    """
    Abstract base class for saga steps.

    Attributes:
        criticality: Whether a failure aborts the saga or is only logged.
        compensable: Whether undo() reverts the step after a later failure.
        failure_message: Caller-facing message used when this step aborts.

    Example:
        >>> class MyCommand(Command):
        ...     async def execute(self) -> Dict[str, Any]:
        ...         return {"success": True}
    """

    criticality = StepCriticality.CRITICAL
    compensable = False
    failure_message: Optional[str] = None

    @property
    def name(self) -> str:
        return self.__class__.__name__

    @abstractmethod
    async def execute(self) -> Dict[str, Any]:
        """
        Execute the command's primary action.

        Returns:
            Dict[str, Any]: Results of the execution.

        Raises:
            Exception: Any failure; the saga applies the criticality policy.
        """

    async def undo(self) -> None:
        """
        Compensate the command's action.

        Only called for compensable commands that completed. Must raise if the
        compensating write fails; the saga turns that into a
        CompensationFailedError.
        """

    def log_context(self) -> Dict[str, Any]:
        """Identifiers logged with a failure so the step can be replayed manually."""
        return {}


# ============================================================================
# Assignment saga
# ============================================================================


class AssignConsultantCommand(Command):
    """
    Step A: link an unassigned farmer to a consultant.

    The write is conditioned on ``farmers.consultant_id IS NULL`` at write
    time; zero affected rows means another request won the race and the
    step fails with ``ConflictError``. No retry is attempted.
    """

    compensable = True

    def __init__(
        self,
        store: "IDataStore",
        farmer_id: str,
        consultant_profile_id: str,
    ):
        self.store = store
        self.farmer_id = farmer_id
        self.consultant_profile_id = consultant_profile_id
        self.assigned = False

    async def execute(self) -> Dict[str, Any]:
        logger.info(
            f"🔗 Linking farmer {self.farmer_id} to consultant {self.consultant_profile_id}"
        )
        affected = await self.store.conditional_update(
            "farmers",
            self.farmer_id,
            {"consultant_id": self.consultant_profile_id, "updated_at": utc_now_iso()},
            {"consultant_id": None},
        )
        if affected == 0:
            logger.warning(
                f"⚠️ Farmer {self.farmer_id} was assigned by a concurrent request"
            )
            raise ConflictError(
                "Farmer is already assigned to a consultant", code="already_assigned"
            )

        self.assigned = True
        return {"farmer_id": self.farmer_id, "consultant_id": self.consultant_profile_id}

    async def undo(self) -> None:
        if not self.assigned:
            logger.warning(f"⚠️ Farmer {self.farmer_id} not linked, nothing to undo")
            return

        logger.info(f"↩️ Unlinking farmer {self.farmer_id}")
        # Unconditional: this saga instance is the writer of record.
        await self.store.update(
            "farmers",
            self.farmer_id,
            {"consultant_id": None, "updated_at": utc_now_iso()},
        )
        self.assigned = False

    def log_context(self) -> Dict[str, Any]:
        return {
            "table": "farmers",
            "farmer_id": self.farmer_id,
            "consultant_profile_id": self.consultant_profile_id,
        }


class ActivateProfileCommand(Command):
    """Step B: set the linked farmer profile status to ``active``."""

    failure_message = "Failed to update farmer status"

    def __init__(self, store: "IDataStore", profile_id: str):
        self.store = store
        self.profile_id = profile_id

    async def execute(self) -> Dict[str, Any]:
        affected = await self.store.update(
            "profiles",
            self.profile_id,
            {"status": ProfileStatus.ACTIVE.value, "updated_at": utc_now_iso()},
        )
        if affected == 0:
            raise NotFoundError(f"Profile {self.profile_id} not found")
        logger.info(f"✅ Profile {self.profile_id} activated")
        return {"profile_id": self.profile_id, "status": ProfileStatus.ACTIVE.value}

    def log_context(self) -> Dict[str, Any]:
        return {"table": "profiles", "profile_id": self.profile_id}


class IncrementConsultantCounterCommand(Command):
    """Step C: server-side increment of the consultant's assigned-farmer counter."""

    criticality = StepCriticality.BEST_EFFORT

    def __init__(self, store: "IDataStore", consultant_record_id: str):
        self.store = store
        self.consultant_record_id = consultant_record_id

    async def execute(self) -> Dict[str, Any]:
        await self.store.atomic_increment(
            INCREMENT_FARMER_COUNT_RPC,
            {"consultant_id_param": self.consultant_record_id},
        )
        return {"consultant_id": self.consultant_record_id}

    def log_context(self) -> Dict[str, Any]:
        return {
            "procedure": INCREMENT_FARMER_COUNT_RPC,
            "consultant_id": self.consultant_record_id,
        }


class NotifyFarmerConsultantLinkCommand(Command):
    """
    Step D: notify both parties of a new link in a single batch insert.

    The farmer's display name is read here so a failed read only skips
    the notifications.
    """

    criticality = StepCriticality.BEST_EFFORT

    def __init__(
        self,
        store: "IDataStore",
        notification_service: "NotificationService",
        farmer_profile_id: str,
        consultant_profile_id: str,
        consultant_name: Optional[str] = None,
    ):
        self.store = store
        self.notification_service = notification_service
        self.farmer_profile_id = farmer_profile_id
        self.consultant_profile_id = consultant_profile_id
        self.consultant_name = consultant_name or "A consultant"

    async def execute(self) -> Dict[str, Any]:
        farmer = await self.store.find_one(
            "profiles", {"id": self.farmer_profile_id}, columns="id, full_name"
        )
        inserted = await notify_farmer_consultant_link(
            self.notification_service,
            self.farmer_profile_id,
            farmer.get("full_name") or "A farmer",
            self.consultant_profile_id,
            self.consultant_name,
        )
        return {"notifications": len(inserted)}

    def log_context(self) -> Dict[str, Any]:
        return {
            "table": "notifications",
            "farmer_profile_id": self.farmer_profile_id,
            "consultant_profile_id": self.consultant_profile_id,
        }


# ============================================================================
# Registration completion saga
# ============================================================================


class UpdateAvatarCommand(Command):
    """Step A: write the avatar reference onto the profile."""

    criticality = StepCriticality.BEST_EFFORT

    def __init__(self, store: "IDataStore", profile_id: str, avatar_url: str):
        self.store = store
        self.profile_id = profile_id
        self.avatar_url = avatar_url

    async def execute(self) -> Dict[str, Any]:
        await self.store.update(
            "profiles",
            self.profile_id,
            {"avatar_url": self.avatar_url, "updated_at": utc_now_iso()},
        )
        return {"avatar_url": self.avatar_url}

    def log_context(self) -> Dict[str, Any]:
        return {
            "table": "profiles",
            "profile_id": self.profile_id,
            "avatar_url": self.avatar_url,
        }


class UpdateConsultantRecordCommand(Command):
    """
    Step B: write location fields and document references onto the consultant record.

    Last state-bearing write of the registration, so it has no compensation.
    Re-sending the same payload overwrites the same values.
    """

    failure_message = "Failed to save consultant data"

    def __init__(self, store: "IDataStore", profile_id: str, fields: Dict[str, Any]):
        self.store = store
        self.profile_id = profile_id
        self.fields = fields

    async def execute(self) -> Dict[str, Any]:
        updates = dict(self.fields, updated_at=utc_now_iso())
        try:
            affected = await self.store.update(
                "consultants", self.profile_id, updates, key="profile_id"
            )
        except RepositoryError as exc:
            raise InternalError(
                self.failure_message,
                details=exc.details or "Database update failed",
            ) from exc

        if affected == 0:
            # Nothing was saved, so the caller must not see a success
            raise NotFoundError("Consultant record not found")

        logger.info(f"✅ Consultant record updated for profile {self.profile_id}")
        return updates

    def log_context(self) -> Dict[str, Any]:
        return {"table": "consultants", "profile_id": self.profile_id}


class CreateApprovalRequestCommand(Command):
    """Step C: file a review request with categorized document metadata."""

    criticality = StepCriticality.BEST_EFFORT

    def __init__(self, store: "IDataStore", profile_id: str, document_urls: List[str]):
        self.store = store
        self.profile_id = profile_id
        self.document_urls = document_urls

    async def execute(self) -> Dict[str, Any]:
        request = ReviewRequest(
            profile_id=self.profile_id,
            submitted_documents=build_submitted_documents(self.document_urls),
        )
        return await self.store.insert("approval_requests", request.to_row())

    def log_context(self) -> Dict[str, Any]:
        return {
            "table": "approval_requests",
            "profile_id": self.profile_id,
            "document_urls": self.document_urls,
        }


class DispatchNotificationCommand(Command):
    """Send a single templated notification as a side effect."""

    criticality = StepCriticality.BEST_EFFORT

    def __init__(
        self,
        notification_service: "NotificationService",
        kind: NotificationKind,
        recipient_id: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.notification_service = notification_service
        self.kind = kind
        self.recipient_id = recipient_id
        self.context = context or {}

    async def execute(self) -> Dict[str, Any]:
        return await self.notification_service.dispatch(
            self.kind, self.recipient_id, self.context
        )

    def log_context(self) -> Dict[str, Any]:
        return {
            "table": "notifications",
            "kind": getattr(self.kind, "value", self.kind),
            "recipient_id": self.recipient_id,
        }
