"""Order URL configuration.

Storefront: ``POST orders/`` and ``POST orders/cancel-by-reference/``.
Admin console: list, detail, ``PATCH`` status, ``cancel`` and ``summary``.
"""

from __future__ import annotations

from rest_framework.routers import SimpleRouter

from modules.orders.views import OrderViewSet

router = SimpleRouter(trailing_slash=True)
router.register("orders", OrderViewSet, basename="order")

urlpatterns = router.urls
