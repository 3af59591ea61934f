"""
Tests for activity logging.
"""

import pytest

from apps.core.audit import log_activity
from apps.core.models import Activity


@pytest.mark.django_db
class TestLogActivity:
    def test_user_action(self, admin_user):
        activity = log_activity(
            Activity.UPDATE,
            Activity.PRODUCT,
            description="Changed price",
            user=admin_user,
            entity_id="p1",
            entity_name="Kettle",
            metadata={"price": "35.50"},
        )

        activity.refresh_from_db()
        assert activity.user_id == str(admin_user.pk)
        assert activity.user_name == "Store Admin"
        assert activity.entity_id == "p1"
        assert activity.metadata == {"price": "35.50"}

    def test_system_action(self):
        activity = log_activity(Activity.BACKUP, Activity.SYSTEM, description="Nightly run")

        assert activity.user_id == "system"
        assert activity.user_name == "System"
        assert activity.entity_id is None

    def test_display_name_falls_back_to_username(self, regular_user):
        activity = log_activity(Activity.LOGIN, Activity.USER_ENTITY, user=regular_user)
        assert activity.user_name == "cashier"

    def test_newest_first(self, admin_user):
        first = log_activity(Activity.CREATE, Activity.PRODUCT, user=admin_user)
        second = log_activity(Activity.DELETE, Activity.PRODUCT, user=admin_user)

        assert list(Activity.objects.all()) == [second, first]
