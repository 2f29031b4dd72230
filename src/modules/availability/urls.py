"""Availability URL configuration.

Dates in the path are ``YYYY-MM-DD``; anything else does not resolve.
"""

from __future__ import annotations

from rest_framework.routers import SimpleRouter

from modules.availability.views import AvailabilityViewSet, BlockedDateViewSet

router = SimpleRouter(trailing_slash=True)
router.register("availability", AvailabilityViewSet, basename="availability")
router.register("blocked-dates", BlockedDateViewSet, basename="blocked-date")

urlpatterns = router.urls
