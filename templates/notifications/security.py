"""Plantillas de seguridad, autenticación y perfil."""

from models.notifications import (
    NotificationCategory,
    NotificationKind,
    NotificationPriority,
    NotificationTemplate,
)

SECURITY_TEMPLATES = (
    NotificationTemplate(
        kind=NotificationKind.SECURITY_ALERT,
        category=NotificationCategory.SECURITY,
        priority=NotificationPriority.HIGH,
        generate_title=lambda ctx: ctx.get("alertType") or "Security Alert",
        generate_message=lambda ctx: ctx["message"],
        generate_action_url=lambda ctx: ctx.get("actionUrl") or "/dashboard/settings",
        generate_metadata=lambda ctx: ctx.get("metadata"),
    ),
    NotificationTemplate(
        kind=NotificationKind.PASSWORD_RESET,
        category=NotificationCategory.SECURITY,
        priority=NotificationPriority.HIGH,
        generate_title=lambda ctx: "Password Reset Requested",
        generate_message=lambda ctx: (
            "A password reset link has been sent to your email. If you did not "
            "request this, please contact support immediately."
        ),
        generate_action_url=lambda ctx: "/dashboard/settings",
    ),
    NotificationTemplate(
        kind=NotificationKind.EMAIL_VERIFIED,
        category=NotificationCategory.AUTHENTICATION,
        priority=NotificationPriority.NORMAL,
        generate_title=lambda ctx: "Email Verified",
        generate_message=lambda ctx: (
            "Your email has been successfully verified. "
            "You now have full access to all features."
        ),
        generate_action_url=lambda ctx: "/dashboard",
    ),
    NotificationTemplate(
        kind=NotificationKind.AVATAR_UPDATED,
        category=NotificationCategory.PROFILE,
        priority=NotificationPriority.LOW,
        generate_title=lambda ctx: "Profile Photo Updated",
        generate_message=lambda ctx: "Your profile photo has been updated successfully",
        generate_action_url=lambda ctx: "/dashboard/settings",
    ),
)
