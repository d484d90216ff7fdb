"""Server-side role checks.

The storefront UI hides admin screens from regular customers, but the
order table is reachable by any authenticated caller, so every admin-only
operation is gated here on the server.
"""

from __future__ import annotations

from typing import Any

from rest_framework.permissions import BasePermission


def is_store_admin(user: Any) -> bool:
    """Return ``True`` for authenticated, active staff users."""
    return bool(
        user
        and getattr(user, "is_authenticated", False)
        and getattr(user, "is_active", False)
        and getattr(user, "is_staff", False)
    )


class IsStoreAdmin(BasePermission):
    """Allow access only to store administrators (``is_staff``)."""

    message = "Administrator role required."

    def has_permission(self, request, view) -> bool:
        return is_store_admin(request.user)
