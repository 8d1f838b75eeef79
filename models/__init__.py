"""
Modelos Pydantic del servicio.
"""

from models.notifications import (
    NotificationCategory,
    NotificationKind,
    NotificationPriority,
    NotificationRow,
    NotificationTemplate,
)
from models.profiles import (
    ConsultantRecord,
    FarmerRecord,
    Profile,
    ProfileStatus,
    ReviewRequest,
    Role,
    SubmittedDocuments,
)

__all__ = [
    "NotificationCategory",
    "NotificationKind",
    "NotificationPriority",
    "NotificationRow",
    "NotificationTemplate",
    "ConsultantRecord",
    "FarmerRecord",
    "Profile",
    "ProfileStatus",
    "ReviewRequest",
    "Role",
    "SubmittedDocuments",
]
