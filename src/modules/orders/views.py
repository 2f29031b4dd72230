"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.

Public (storefront): ``create`` and ``cancel_by_reference``.
Everything else is the admin console and requires a staff JWT.
"""

from __future__ import annotations

from uuid import UUID

import structlog
from django.db import OperationalError
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.permissions import AllowAny, BasePermission, IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.availability.exceptions import AvailabilityUnavailable, DateUnavailable
from modules.availability.views import build_availability_service
from modules.core.pagination import StandardResultsSetPagination
from modules.orders.constants import OrderStatus
from modules.orders.dtos import CancelByReferenceDTO, PlaceOrderDTO
from modules.orders.exceptions import (
    DeliveryDateOutOfWindow,
    InvalidOrderStatus,
    OrderNotFound,
)
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    CancelByReferenceSerializer,
    CancelOrderSerializer,
    OrderConfirmationSerializer,
    OrderListSerializer,
    OrderSerializer,
    PlaceOrderSerializer,
    StatusSummarySerializer,
    UpdateStatusSerializer,
)
from modules.orders.services import OrderService

logger = structlog.get_logger(__name__)

PUBLIC_ACTIONS = {"create", "cancel_by_reference"}


def _unavailable_date_response(exc: DateUnavailable) -> Response:
    return Response(
        {"detail": str(exc), "code": exc.code},
        status=status.HTTP_409_CONFLICT,
    )


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with injected repositories (DIP).
    Does **not** extend ``ModelViewSet``: writes go through the
    service/repository layer.
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    pagination_class = StandardResultsSetPagination
    filterset_class = OrderFilter
    search_fields = ["order_ref", "customer_name", "customer_email"]
    ordering_fields = ["created_at", "delivery_date", "status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            availability_service=build_availability_service(),
        )

    def get_permissions(self) -> list[BasePermission]:
        if self.action in PUBLIC_ACTIONS:
            return [AllowAny()]
        return [IsAdminUser()]

    def get_throttles(self) -> list[BaseThrottle]:
        """Scope throttling per action."""
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "order_creation"
        elif self.action == "cancel_by_reference":
            throttle_scope = "order_cancellation"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    # ------------------------------------------------------------------
    # Create (storefront)
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/

        Supports idempotency via the ``Idempotency-Key`` header.
        Returns 200 if the key was already used, 201 for new orders.
        A date that filled up or was blocked since the customer last
        looked answers 409 with a ``code`` the storefront can branch on.
        """
        create_serializer = PlaceOrderSerializer(data=request.data)
        create_serializer.is_valid(raise_exception=True)

        idempotency_key = request.headers.get("Idempotency-Key") or None
        if idempotency_key:
            existing = self._service.get_by_idempotency_key(idempotency_key)
            if existing:
                return Response(OrderConfirmationSerializer(existing).data)

        dto = PlaceOrderDTO(
            **create_serializer.validated_data,
            idempotency_key=idempotency_key,
        )

        try:
            order = self._service.place_order(dto)
        except DeliveryDateOutOfWindow as exc:
            return Response(
                {"detail": str(exc), "code": "out_of_window"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        except DateUnavailable as exc:
            return _unavailable_date_response(exc)
        except OperationalError as exc:
            # Lock wait timed out; the placement transaction was rolled back
            logger.warning(
                "order.placement_busy",
                delivery_date=dto.delivery_date.isoformat(),
                error=str(exc),
            )
            return Response(
                {"detail": "Could not place the order right now, please retry."},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )

        out = OrderConfirmationSerializer(order)
        return Response(out.data, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # Customer self-cancellation
    # ------------------------------------------------------------------

    @action(detail=False, methods=["post"], url_path="cancel-by-reference")
    def cancel_by_reference(self, request: Request) -> Response:
        """POST /api/v1/orders/cancel-by-reference/

        Body: ``order_ref`` + ``email`` as identity proof.  An unknown
        reference and a wrong email both answer 404.
        """
        serializer = CancelByReferenceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = self._service.cancel_by_reference(
                CancelByReferenceDTO(**serializer.validated_data)
            )
        except OrderNotFound:
            return Response(
                {"detail": "Order not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        except InvalidOrderStatus as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        return Response(OrderConfirmationSerializer(order).data)

    # ------------------------------------------------------------------
    # List / Retrieve (admin)
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Filtering (status, delivery range, created range) is handled by
        ``OrderFilter``; ``search`` matches reference, name and email.
        Results are paginated.
        """
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = OrderListSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            order = self._service.get_order(str(pk))
        except OrderNotFound:
            return Response(
                {"detail": "Order not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        serializer = OrderSerializer(order)
        return Response(serializer.data)

    @action(detail=False, methods=["get"])
    def summary(self, request: Request) -> Response:
        """GET /api/v1/orders/summary/"""
        summary = self._service.status_summary()
        return Response(StatusSummarySerializer(summary.model_dump()).data)

    # ------------------------------------------------------------------
    # Status Update (admin)
    # ------------------------------------------------------------------

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/orders/{pk}/

        Updates order status.  Cancellations are **not** allowed via
        this endpoint; use ``POST /orders/{id}/cancel/`` instead.
        """
        serializer = UpdateStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        new_status = serializer.validated_data["status"]

        if new_status == OrderStatus.CANCELLED:
            return Response(
                {"detail": "Use the /cancel/ endpoint for cancellations."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            order = self._service.update_status(
                order_id=UUID(str(pk)),
                new_status=new_status,
                notes=serializer.validated_data["notes"],
                user=request.user,
            )
        except ValueError:
            return Response(
                {"detail": "Invalid order ID format."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        except OrderNotFound:
            return Response(
                {"detail": "Order not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        except InvalidOrderStatus as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )
        except DateUnavailable as exc:
            return _unavailable_date_response(exc)
        except AvailabilityUnavailable as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )

        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Cancel (admin, dedicated action)
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/cancel/

        The delivery date stays on the order; its slot frees up for the
        next availability read.
        """
        serializer = CancelOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = self._service.cancel_order(
                order_id=UUID(str(pk)),
                notes=serializer.validated_data["notes"],
                user=request.user,
            )
        except ValueError:
            return Response(
                {"detail": "Invalid order ID format."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        except OrderNotFound:
            return Response(
                {"detail": "Order not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        except InvalidOrderStatus as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        return Response(OrderSerializer(order).data)
