import pytest
from django.contrib.auth.models import AnonymousUser

from modules.core.permissions import is_store_admin

pytestmark = pytest.mark.unit


class TestIsStoreAdmin:
    def test_staff_user(self, store_admin):
        assert is_store_admin(store_admin)

    def test_regular_user(self, shopper):
        assert not is_store_admin(shopper)

    def test_inactive_staff(self, store_admin):
        store_admin.is_active = False
        assert not is_store_admin(store_admin)

    def test_anonymous(self):
        assert not is_store_admin(AnonymousUser())
        assert not is_store_admin(None)
