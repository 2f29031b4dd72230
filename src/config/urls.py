"""Root URL configuration.

- ``/health`` and ``/api/v1/me``: operational endpoints.
- ``/api/v1/availability/``: public calendar.
- ``/api/v1/orders/``: storefront submission and the admin console.
- ``/api/v1/blocked-dates/``: admin capacity console.
- ``/api/v1/auth/token/``: SimpleJWT for admin console logins.
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)
from rest_framework_simplejwt.views import (
    TokenObtainPairView,
    TokenRefreshView,
    TokenVerifyView,
)

auth_urlpatterns = [
    path("token/", TokenObtainPairView.as_view(), name="token_obtain"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("token/verify/", TokenVerifyView.as_view(), name="token_verify"),
]

api_v1_urlpatterns = [
    path("", include("modules.availability.urls")),
    path("", include("modules.orders.urls")),
    path("auth/", include(auth_urlpatterns)),
]

docs_urlpatterns = [
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("redoc/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
]

urlpatterns = [
    path("admin/", admin.site.urls),
    path("", include("modules.core.urls")),
    path("api/v1/", include(api_v1_urlpatterns)),
    path("api/", include(docs_urlpatterns)),
]
