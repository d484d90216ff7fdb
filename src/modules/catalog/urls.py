"""Catalog URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.catalog.views import ElectronicViewSet, SchoolViewSet, SupplyPackViewSet

router = DefaultRouter(trailing_slash=True)
router.register("schools", SchoolViewSet, basename="school")
router.register("packs", SupplyPackViewSet, basename="pack")
router.register("electronics", ElectronicViewSet, basename="electronic")

urlpatterns = router.urls
