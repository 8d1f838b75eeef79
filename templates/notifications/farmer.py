"""Plantillas de notificación dirigidas a agricultores."""

from models.notifications import (
    NotificationCategory,
    NotificationKind,
    NotificationPriority,
    NotificationTemplate,
)


def _farm_setup_message(ctx) -> str:
    return (
        "Your farm details have been set up: "
        f"{ctx['farmName']} - {ctx['landSize']} acres"
    )


def _profile_update_message(ctx) -> str:
    updated_by = ctx.get("updatedBy")
    if updated_by:
        return f"Your profile was updated by {updated_by}"
    return "Your profile has been updated successfully"


FARMER_TEMPLATES = (
    NotificationTemplate(
        kind=NotificationKind.CONSULTANT_ASSIGNED,
        category=NotificationCategory.RELATIONSHIP,
        priority=NotificationPriority.HIGH,
        generate_title=lambda ctx: "Consultant Assigned",
        generate_message=lambda ctx: (
            f"{ctx['consultantName']} has been assigned as your agricultural consultant"
        ),
        generate_action_url=lambda ctx: "/dashboard/farmer/consultant",
        generate_metadata=lambda ctx: {"consultant_id": ctx.get("consultantId")},
    ),
    NotificationTemplate(
        kind=NotificationKind.CONSULTANT_REMOVED,
        category=NotificationCategory.RELATIONSHIP,
        priority=NotificationPriority.HIGH,
        generate_title=lambda ctx: "Consultant Assignment Changed",
        generate_message=lambda ctx: (
            f"You have been unlinked from consultant {ctx['consultantName']}. "
            "A new consultant will be assigned soon."
        ),
        generate_action_url=lambda ctx: "/dashboard/farmer",
        generate_metadata=lambda ctx: {
            "previous_consultant_id": ctx.get("consultantId"),
            "reason": ctx.get("reason"),
        },
    ),
    NotificationTemplate(
        kind=NotificationKind.PROFILE_UPDATE,
        category=NotificationCategory.PROFILE,
        priority=NotificationPriority.NORMAL,
        generate_title=lambda ctx: "Profile Updated",
        generate_message=_profile_update_message,
        generate_action_url=lambda ctx: "/dashboard/farmer/settings",
    ),
    NotificationTemplate(
        kind=NotificationKind.FARM_SETUP,
        category=NotificationCategory.FARM,
        priority=NotificationPriority.NORMAL,
        generate_title=lambda ctx: "Farm Profile Configured",
        generate_message=_farm_setup_message,
        generate_action_url=lambda ctx: "/dashboard/farmer/farm",
        generate_metadata=lambda ctx: {
            "farm_name": ctx["farmName"],
            "land_size": ctx["landSize"],
            "crops": ctx.get("crops"),
        },
    ),
    NotificationTemplate(
        kind=NotificationKind.FARM_UPDATE,
        category=NotificationCategory.FARM,
        priority=NotificationPriority.NORMAL,
        generate_title=lambda ctx: "Farm Details Updated",
        generate_message=lambda ctx: (
            f"Your farm information has been updated: {ctx['updateSummary']}"
        ),
        generate_action_url=lambda ctx: "/dashboard/farmer/farm",
        generate_metadata=lambda ctx: ctx.get("metadata"),
    ),
    NotificationTemplate(
        kind=NotificationKind.ACCOUNT_ACTIVATED,
        category=NotificationCategory.STATUS,
        priority=NotificationPriority.HIGH,
        generate_title=lambda ctx: "Account Activated",
        generate_message=lambda ctx: (
            "Your account is now active. You can log in and start using AgriFusion."
        ),
        generate_action_url=lambda ctx: "/dashboard/farmer",
    ),
)
