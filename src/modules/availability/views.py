"""Availability API views.

Exposes the ``AvailabilityService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into HTTP status codes:
invalid input -> 400, store failure -> 503.  The calendar never renders
a guessed availability.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.availability.constants import DATE_PATTERN
from modules.availability.dates import to_calendar_date
from modules.availability.exceptions import (
    AvailabilityUnavailable,
    InvalidAvailabilityQuery,
)
from modules.availability.models import BlockedDate
from modules.availability.repositories.django_repository import (
    BlockedDateDjangoRepository,
    DeliverySlotDjangoRepository,
)
from modules.availability.serializers import (
    AdmissibilitySerializer,
    BlockDateSerializer,
    BlockedDateSerializer,
    CommandResultSerializer,
    DateAvailabilitySerializer,
)
from modules.availability.services import AvailabilityService
from modules.orders.repositories.django_repository import OrderDjangoRepository


def build_availability_service() -> AvailabilityService:
    return AvailabilityService(
        order_repository=OrderDjangoRepository(),
        blocked_date_repository=BlockedDateDjangoRepository(),
        slot_repository=DeliverySlotDjangoRepository(),
    )


class AvailabilityViewSet(GenericViewSet):
    """Public, read-only availability calendar.

    * ``GET /availability/?start=&end=`` -> one record per day.
    * ``GET /availability/{date}/`` -> single-date admissibility.
    """

    permission_classes = [AllowAny]
    throttle_scope = "availability"
    serializer_class = DateAvailabilitySerializer
    lookup_field = "date"
    lookup_value_regex = DATE_PATTERN

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_availability_service()

    def list(self, request: Request) -> Response:
        """GET /api/v1/availability/

        Both bounds are optional; see
        ``AvailabilityService.get_window_availability`` for defaults.
        """
        try:
            window = self._service.get_window_availability(
                start=request.query_params.get("start"),
                end=request.query_params.get("end"),
            )
        except InvalidAvailabilityQuery as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except AvailabilityUnavailable:
            return Response(
                {"detail": "Could not load availability."},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )
        serializer = DateAvailabilitySerializer(window, many=True)
        return Response(serializer.data)

    def retrieve(self, request: Request, date: str | None = None) -> Response:
        """GET /api/v1/availability/{date}/"""
        try:
            day = to_calendar_date(date)
            admissible = self._service.is_date_admissible(day)
        except InvalidAvailabilityQuery as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except AvailabilityUnavailable:
            return Response(
                {"detail": "Could not load availability."},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )
        serializer = AdmissibilitySerializer({"date": day, "admissible": admissible})
        return Response(serializer.data)


class BlockedDateViewSet(GenericViewSet):
    """Admin capacity console: list, block and unblock dates.

    ``PUT`` and ``DELETE`` answer ``{"success": bool}``; a store failure
    is reported as ``success: false`` with HTTP 503 so the operator can
    retry.
    """

    queryset = BlockedDate.objects.all()
    permission_classes = [IsAdminUser]
    serializer_class = BlockedDateSerializer
    lookup_field = "date"
    lookup_value_regex = DATE_PATTERN

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_availability_service()

    def list(self, request: Request) -> Response:
        """GET /api/v1/blocked-dates/"""
        try:
            blocked = self._service.list_blocked_dates()
        except AvailabilityUnavailable as exc:
            return Response(
                {"detail": str(exc)}, status=status.HTTP_503_SERVICE_UNAVAILABLE
            )
        serializer = BlockedDateSerializer(blocked, many=True)
        return Response(serializer.data)

    def update(self, request: Request, date: str | None = None) -> Response:
        """PUT /api/v1/blocked-dates/{date}/  body: ``{"reason": "..."}``"""
        body = BlockDateSerializer(data=request.data)
        body.is_valid(raise_exception=True)
        try:
            success = self._service.block_date(date, body.validated_data["reason"])
        except InvalidAvailabilityQuery as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return self._command_result(success)

    def destroy(self, request: Request, date: str | None = None) -> Response:
        """DELETE /api/v1/blocked-dates/{date}/"""
        try:
            success = self._service.unblock_date(date)
        except InvalidAvailabilityQuery as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return self._command_result(success)

    @staticmethod
    def _command_result(success: bool) -> Response:
        serializer = CommandResultSerializer({"success": success})
        return Response(
            serializer.data,
            status=status.HTTP_200_OK if success else status.HTTP_503_SERVICE_UNAVAILABLE,
        )
