"""Plantillas generales, de estado y de administración."""

from models.notifications import (
    NotificationCategory,
    NotificationKind,
    NotificationPriority,
    NotificationTemplate,
)

WELCOME_DEFAULT_MESSAGE = (
    "Thank you for joining AgriFusion. We are excited to have you on board!"
)

SYSTEM_TEMPLATES = (
    NotificationTemplate(
        kind=NotificationKind.WELCOME,
        category=NotificationCategory.SYSTEM,
        priority=NotificationPriority.NORMAL,
        generate_title=lambda ctx: "Welcome to AgriFusion!",
        generate_message=lambda ctx: ctx.get("message") or WELCOME_DEFAULT_MESSAGE,
        generate_action_url=lambda ctx: ctx.get("actionUrl") or "/dashboard",
        generate_metadata=lambda ctx: ctx.get("metadata"),
    ),
    NotificationTemplate(
        kind=NotificationKind.APPROVAL_PENDING,
        category=NotificationCategory.STATUS,
        priority=NotificationPriority.NORMAL,
        generate_title=lambda ctx: "Application Submitted",
        generate_message=lambda ctx: (
            "Your application has been submitted. Our team will review your "
            "credentials within 2-3 business days."
        ),
        generate_action_url=lambda ctx: "/dashboard",
    ),
    NotificationTemplate(
        kind=NotificationKind.SYSTEM,
        category=NotificationCategory.SYSTEM,
        priority=NotificationPriority.NORMAL,
        generate_title=lambda ctx: ctx["title"],
        generate_message=lambda ctx: ctx["message"],
        generate_action_url=lambda ctx: ctx.get("actionUrl"),
        generate_metadata=lambda ctx: ctx.get("metadata"),
    ),
    NotificationTemplate(
        kind=NotificationKind.CONSULTANT_PENDING_REVIEW,
        category=NotificationCategory.SYSTEM,
        priority=NotificationPriority.NORMAL,
        generate_title=lambda ctx: "New Consultant Registration",
        generate_message=lambda ctx: (
            f"{ctx['consultantName']} has submitted their registration for approval"
        ),
        generate_action_url=lambda ctx: "/admin/approvals",
        generate_metadata=lambda ctx: {
            "consultant_id": ctx.get("consultantId"),
            "submitted_at": ctx.get("submittedAt"),
        },
    ),
    NotificationTemplate(
        kind=NotificationKind.FARMER_STATUS_CHANGE,
        category=NotificationCategory.SYSTEM,
        priority=NotificationPriority.NORMAL,
        generate_title=lambda ctx: "Farmer Status Changed",
        generate_message=lambda ctx: (
            f"{ctx['farmerName']} status changed to {ctx['newStatus']}"
        ),
        generate_action_url=lambda ctx: "/admin/farmers",
        generate_metadata=lambda ctx: {
            "farmer_id": ctx.get("farmerId"),
            "old_status": ctx.get("oldStatus"),
            "new_status": ctx["newStatus"],
        },
    ),
)
