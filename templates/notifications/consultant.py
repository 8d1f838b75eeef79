"""Plantillas de notificación dirigidas a consultores."""

from models.notifications import (
    NotificationCategory,
    NotificationKind,
    NotificationPriority,
    NotificationTemplate,
)

CONSULTANT_TEMPLATES = (
    NotificationTemplate(
        kind=NotificationKind.FARMER_LINKED,
        category=NotificationCategory.RELATIONSHIP,
        priority=NotificationPriority.NORMAL,
        generate_title=lambda ctx: "New Farmer Added",
        generate_message=lambda ctx: (
            f"{ctx['farmerName']} has been successfully added to your network"
        ),
        generate_action_url=lambda ctx: "/dashboard/consultant/farmers",
        generate_metadata=lambda ctx: {"farmer_id": ctx.get("farmerId")},
    ),
    NotificationTemplate(
        kind=NotificationKind.FARMER_CREATED,
        category=NotificationCategory.RELATIONSHIP,
        priority=NotificationPriority.NORMAL,
        generate_title=lambda ctx: "Farmer Account Created",
        generate_message=lambda ctx: (
            f"New farmer account for {ctx['farmerName']} has been created successfully"
        ),
        generate_action_url=lambda ctx: "/dashboard/consultant/farmers",
        generate_metadata=lambda ctx: {"farmer_id": ctx.get("farmerId")},
    ),
    NotificationTemplate(
        kind=NotificationKind.FARMER_REMOVED,
        category=NotificationCategory.RELATIONSHIP,
        priority=NotificationPriority.NORMAL,
        generate_title=lambda ctx: "Farmer Removed",
        generate_message=lambda ctx: (
            f"{ctx['farmerName']} has been removed from your network"
        ),
        generate_action_url=lambda ctx: "/dashboard/consultant/farmers",
        generate_metadata=lambda ctx: {"farmer_id": ctx.get("farmerId")},
    ),
    NotificationTemplate(
        kind=NotificationKind.SETTINGS_UPDATED,
        category=NotificationCategory.PROFILE,
        priority=NotificationPriority.NORMAL,
        generate_title=lambda ctx: "Settings Saved",
        generate_message=lambda ctx: (
            "Your profile and professional settings have been updated successfully"
        ),
        generate_action_url=lambda ctx: "/dashboard/consultant/settings",
    ),
    NotificationTemplate(
        kind=NotificationKind.APPROVAL_SUCCESS,
        category=NotificationCategory.STATUS,
        priority=NotificationPriority.HIGH,
        generate_title=lambda ctx: "Account Approved!",
        generate_message=lambda ctx: (
            "Congratulations! Your consultant account has been approved. "
            "You can now access all features."
        ),
        generate_action_url=lambda ctx: "/dashboard/consultant",
    ),
    NotificationTemplate(
        kind=NotificationKind.APPROVAL_REJECTED,
        category=NotificationCategory.STATUS,
        priority=NotificationPriority.HIGH,
        generate_title=lambda ctx: "Application Update",
        generate_message=lambda ctx: (
            "Your consultant application requires additional review. "
            f"Reason: {ctx['reason']}"
            if ctx.get("reason")
            else "Your consultant application requires additional review. "
            "Our team will contact you shortly."
        ),
        generate_action_url=lambda ctx: "/dashboard/consultant",
        generate_metadata=lambda ctx: {"rejection_reason": ctx.get("reason")},
    ),
    NotificationTemplate(
        kind=NotificationKind.ACCOUNT_SUSPENDED,
        category=NotificationCategory.STATUS,
        priority=NotificationPriority.URGENT,
        generate_title=lambda ctx: "Account Suspended",
        generate_message=lambda ctx: (
            "Your account has been temporarily suspended. "
            "Please contact support for more information."
        ),
        generate_action_url=lambda ctx: "/dashboard/consultant",
    ),
)
