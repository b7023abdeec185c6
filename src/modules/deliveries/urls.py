"""Deliveries URL configuration."""

from __future__ import annotations

from rest_framework.routers import SimpleRouter

from modules.deliveries.views import DeliveryJobViewSet

router = SimpleRouter(trailing_slash=True)
router.register("deliveries/jobs", DeliveryJobViewSet, basename="delivery-job")

urlpatterns = router.urls
