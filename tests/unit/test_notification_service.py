"""
Tests unitarios para el servicio de notificaciones.
"""
from unittest.mock import AsyncMock, MagicMock

import pytest

from core.exceptions import (
    BadRequestError,
    NotFoundError,
    RepositoryError,
    UnknownNotificationKindError,
)
from models.notifications import NotificationKind
from services.notification_service import (
    NotificationService,
    notify_approval_status,
    notify_farm_setup,
    notify_security_alert,
)


@pytest.fixture
def mock_store():
    store = MagicMock()
    store.insert = AsyncMock(side_effect=lambda table, row: dict(row, id="n-1"))
    store.insert_many = AsyncMock(side_effect=lambda table, rows: list(rows))
    return store


class TestBuildNotification:
    def test_builds_row_from_template(self, notification_service):
        row = notification_service.build_notification(
            NotificationKind.FARMER_LINKED, "CO1", {"farmerName": "Pedro", "farmerId": "F1"}
        )

        body = row.to_row()
        assert body["recipient_id"] == "CO1"
        assert body["type"] == "farmer_linked"
        assert body["category"] == "relationship"
        assert body["priority"] == "normal"
        assert body["title"] == "New Farmer Added"
        assert body["message"] == "Pedro has been successfully added to your network"
        assert body["action_url"] == "/dashboard/consultant/farmers"
        assert body["metadata"] == {"farmer_id": "F1"}

    def test_missing_required_field_is_bad_request(self, notification_service):
        with pytest.raises(BadRequestError) as exc_info:
            notification_service.build_notification(NotificationKind.FARMER_LINKED, "CO1", {})

        assert exc_info.value.errors == {"farmerName": "This field is required"}

    def test_absent_optional_fields_are_omitted(self, notification_service):
        row = notification_service.build_notification(NotificationKind.ACCOUNT_ACTIVATED, "F1")

        assert "metadata" not in row.to_row()


class TestDispatch:
    @pytest.mark.asyncio
    async def test_dispatch_single_insert(self, mock_store):
        service = NotificationService(mock_store)

        inserted = await service.dispatch(NotificationKind.WELCOME, "CO1", {})

        assert inserted["id"] == "n-1"
        mock_store.insert.assert_awaited_once()
        table, row = mock_store.insert.await_args.args
        assert table == "notifications"
        assert row["type"] == "welcome"

    @pytest.mark.asyncio
    async def test_unknown_kind_does_not_touch_store(self, mock_store):
        service = NotificationService(mock_store)

        with pytest.raises(UnknownNotificationKindError):
            await service.dispatch("unknown_kind", "CO1", {})

        mock_store.insert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self, store, notification_service):
        store.fail("insert", "notifications")

        with pytest.raises(RepositoryError):
            await notification_service.dispatch(NotificationKind.WELCOME, "CO1")

        assert store.rows("notifications") == []

    @pytest.mark.asyncio
    async def test_dispatch_many_empty_makes_no_call(self, mock_store):
        service = NotificationService(mock_store)

        assert await service.dispatch_many([]) == []
        mock_store.insert_many.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_dispatch_many_single_call(self, mock_store):
        service = NotificationService(mock_store)
        rows = [
            service.build_notification(NotificationKind.ACCOUNT_ACTIVATED, "F1"),
            {"recipient_id": "CO1", "type": "system", "title": "Hi", "message": "Hello"},
        ]

        await service.dispatch_many(rows)

        mock_store.insert_many.assert_awaited_once()
        table, inserted_rows = mock_store.insert_many.await_args.args
        assert table == "notifications"
        assert [row["recipient_id"] for row in inserted_rows] == ["F1", "CO1"]

    @pytest.mark.asyncio
    async def test_dispatch_many_failure_inserts_nothing(self, store, notification_service):
        store.fail("insert_many", "notifications")
        rows = [
            notification_service.build_notification(NotificationKind.ACCOUNT_ACTIVATED, "F1"),
            notification_service.build_notification(NotificationKind.AVATAR_UPDATED, "F1"),
        ]

        with pytest.raises(RepositoryError):
            await notification_service.dispatch_many(rows)

        assert store.rows("notifications") == []


class TestRecipientOperations:
    @pytest.fixture
    def seeded(self, store):
        store.rows("notifications").extend(
            [
                {"id": "n1", "recipient_id": "CO1", "is_read": False, "category": "system",
                 "created_at": "2024-05-01T10:00:00+00:00"},
                {"id": "n2", "recipient_id": "CO1", "is_read": True, "category": "status",
                 "created_at": "2024-05-02T10:00:00+00:00"},
                {"id": "n3", "recipient_id": "CO1", "is_read": False, "category": "status",
                 "created_at": "2024-05-03T10:00:00+00:00"},
                {"id": "n4", "recipient_id": "F1", "is_read": False, "category": "system",
                 "created_at": "2024-05-04T10:00:00+00:00"},
            ]
        )
        return store

    @pytest.mark.asyncio
    async def test_mark_as_read(self, seeded, notification_service):
        await notification_service.mark_as_read("n1", recipient_id="CO1")

        row = seeded.get("notifications", "n1")
        assert row["is_read"] is True
        assert row["read_at"]

    @pytest.mark.asyncio
    async def test_mark_as_read_other_recipient_is_not_found(self, seeded, notification_service):
        with pytest.raises(NotFoundError):
            await notification_service.mark_as_read("n4", recipient_id="CO1")

        assert seeded.get("notifications", "n4")["is_read"] is False

    @pytest.mark.asyncio
    async def test_mark_all_as_read_only_touches_unread(self, seeded, notification_service):
        updated = await notification_service.mark_all_as_read("CO1")

        assert updated == 2
        assert "read_at" not in seeded.get("notifications", "n2")
        assert seeded.get("notifications", "n4")["is_read"] is False

    @pytest.mark.asyncio
    async def test_list_for_recipient_newest_first(self, seeded, notification_service):
        page = await notification_service.list_for_recipient("CO1")

        assert [row["id"] for row in page.rows] == ["n3", "n2", "n1"]
        assert page.total == 3

    @pytest.mark.asyncio
    async def test_list_for_recipient_filters(self, seeded, notification_service):
        page = await notification_service.list_for_recipient(
            "CO1", unread_only=True, category="status"
        )

        assert [row["id"] for row in page.rows] == ["n3"]

    @pytest.mark.asyncio
    async def test_delete(self, seeded, notification_service):
        await notification_service.delete("n1")

        assert seeded.get("notifications", "n1") is None
        with pytest.raises(NotFoundError):
            await notification_service.delete("n1")


class TestHelpers:
    @pytest.mark.asyncio
    async def test_notify_approval_status_picks_kind(self, store, notification_service):
        await notify_approval_status(notification_service, "CO1", approved=True)
        await notify_approval_status(notification_service, "CO1", approved=False, reason="ID")

        kinds = [row["type"] for row in store.rows("notifications")]
        assert kinds == ["approval_success", "approval_rejected"]
        assert store.rows("notifications")[1]["metadata"] == {"rejection_reason": "ID"}

    @pytest.mark.asyncio
    async def test_notify_farm_setup(self, store, notification_service):
        await notify_farm_setup(notification_service, "F1", "Green Acres", 12, ["rice"])

        (row,) = store.rows("notifications")
        assert row["message"] == "Your farm details have been set up: Green Acres - 12 acres"
        assert row["metadata"] == {"farm_name": "Green Acres", "land_size": 12, "crops": ["rice"]}

    @pytest.mark.asyncio
    async def test_notify_security_alert_defaults(self, store, notification_service):
        await notify_security_alert(notification_service, "F1", "", "New login detected")

        (row,) = store.rows("notifications")
        assert row["title"] == "Security Alert"
        assert row["action_url"] == "/dashboard/settings"
