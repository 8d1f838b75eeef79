"""
Tests unitarios para el registro de plantillas de notificación.
"""
import pytest

from core.exceptions import UnknownNotificationKindError
from models.notifications import (
    NotificationCategory,
    NotificationKind,
    NotificationPriority,
    NotificationTemplate,
)
from templates.notifications import TEMPLATE_REGISTRY, get_template, register_template


def test_every_kind_has_a_template():
    assert set(TEMPLATE_REGISTRY) == set(NotificationKind)
    for kind, template in TEMPLATE_REGISTRY.items():
        assert template.kind is kind


def test_lookup_by_string_value():
    assert get_template("welcome").kind is NotificationKind.WELCOME


def test_unknown_kind_raises():
    with pytest.raises(UnknownNotificationKindError) as exc_info:
        get_template("carrier_pigeon")

    assert exc_info.value.status_code == 400


def test_registry_is_read_only():
    with pytest.raises(TypeError):
        TEMPLATE_REGISTRY[NotificationKind.WELCOME] = None


def test_register_template_refuses_silent_overwrite():
    template = get_template(NotificationKind.SYSTEM)

    with pytest.raises(ValueError):
        register_template(template)

    register_template(template, replace=True)
    assert get_template(NotificationKind.SYSTEM) is template


def test_welcome_defaults_and_overrides():
    template = get_template(NotificationKind.WELCOME)

    assert template.generate_title({}) == "Welcome to AgriFusion!"
    assert template.generate_message({}).startswith("Thank you for joining AgriFusion")
    assert template.generate_action_url({}) == "/dashboard"
    assert template.generate_message({"message": "Custom"}) == "Custom"
    assert template.category is NotificationCategory.SYSTEM


def test_consultant_assigned_template():
    template = get_template(NotificationKind.CONSULTANT_ASSIGNED)
    ctx = {"consultantName": "Carla", "consultantId": "CO1"}

    assert template.priority is NotificationPriority.HIGH
    assert template.generate_message(ctx) == (
        "Carla has been assigned as your agricultural consultant"
    )
    assert template.generate_metadata(ctx) == {"consultant_id": "CO1"}


def test_required_context_field_raises_key_error():
    template = get_template(NotificationKind.FARMER_LINKED)

    with pytest.raises(KeyError):
        template.generate_message({})


def test_approval_rejected_message_with_and_without_reason():
    template = get_template(NotificationKind.APPROVAL_REJECTED)

    assert template.generate_message({"reason": "Missing ID"}).endswith(
        "Reason: Missing ID"
    )
    assert template.generate_message({}).endswith("Our team will contact you shortly.")
    assert template.priority is NotificationPriority.HIGH


def test_profile_update_message_mentions_updater():
    template = get_template(NotificationKind.PROFILE_UPDATE)

    assert template.generate_message({"updatedBy": "Carla"}) == (
        "Your profile was updated by Carla"
    )
    assert template.generate_message({}) == "Your profile has been updated successfully"


def test_optional_generators_may_be_absent():
    template = get_template(NotificationKind.PASSWORD_RESET)

    assert isinstance(template, NotificationTemplate)
    assert template.generate_metadata is None
