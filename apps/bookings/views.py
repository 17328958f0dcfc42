"""API views for the booking domain."""

from __future__ import annotations

from django.db.models import Q  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.resources.views import is_platform_staff

from .models import Booking
from .serializers import BookingCreateSerializer, BookingSerializer
from .services import confirm_booking, reject_booking, submit_booking


class IsBookingStakeholder(permissions.BasePermission):
    """Клиент, владелец ресурса и персонал платформы имеют доступ к бронированию."""

    def has_object_permission(self, request, view, obj: Booking):  # type: ignore
        user = request.user
        if not user.is_authenticated:
            return False
        if is_platform_staff(user):
            return True
        if obj.resource.owner_id == user.id:
            return True
        return obj.user_id == user.id


class CanFinalizeBooking(permissions.BasePermission):
    """Подтверждать и отклонять заявки могут владелец ресурса и персонал."""

    def has_object_permission(self, request, view, obj: Booking):  # type: ignore
        user = request.user
        if not user.is_authenticated:
            return False
        return is_platform_staff(user) or obj.resource.owner_id == user.id


class BookingViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Viewset для подачи, просмотра и обработки заявок."""

    queryset = Booking.objects.select_related("slot", "resource", "resource__owner", "user").all()
    permission_classes = [permissions.IsAuthenticated, IsBookingStakeholder]
    parser_classes = [JSONParser, MultiPartParser, FormParser]
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["status", "resource", "slot"]

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return BookingCreateSerializer
        return BookingSerializer

    def get_queryset(self):  # type: ignore
        user = self.request.user
        qs = super().get_queryset()
        if not user.is_authenticated:
            return qs.none()
        if is_platform_staff(user):
            return qs
        if self.action in ("confirm", "reject"):
            return qs.filter(resource__owner=user)
        return qs.filter(Q(user=user) | Q(resource__owner=user))

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        booking = submit_booking(
            data["slot_id"],
            request.user,
            data["amount"],
            receipt_url=data.get("receipt_url") or None,
            receipt=data.get("receipt"),
        )
        read_serializer = BookingSerializer(booking, context=self.get_serializer_context())
        headers = self.get_success_headers(read_serializer.data)
        return Response(read_serializer.data, status=status.HTTP_201_CREATED, headers=headers)

    @action(detail=True, methods=["post"], permission_classes=[permissions.IsAuthenticated, CanFinalizeBooking])
    def confirm(self, request, pk=None):  # type: ignore
        booking: Booking = self.get_object()  # type: ignore
        booking = confirm_booking(booking.pk, request.user)
        return Response(BookingSerializer(booking, context=self.get_serializer_context()).data)

    @action(detail=True, methods=["post"], permission_classes=[permissions.IsAuthenticated, CanFinalizeBooking])
    def reject(self, request, pk=None):  # type: ignore
        booking: Booking = self.get_object()  # type: ignore
        booking = reject_booking(booking.pk, request.user)
        return Response(BookingSerializer(booking, context=self.get_serializer_context()).data)

