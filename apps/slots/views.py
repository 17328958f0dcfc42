"""API views for the slot inventory."""

from __future__ import annotations

import logging

from django.shortcuts import get_object_or_404  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.resources.models import Resource
from apps.resources.views import IsResourceOwnerOrAdmin
from shared.domain import errors
from shared.domain.value_objects import DateRange

from .filters import SlotFilterSet
from .models import Slot
from .serializers import SlotGenerationSerializer, SlotSerializer
from .services.generator import regenerate_slots

logger = logging.getLogger(__name__)


class SlotViewSet(viewsets.ReadOnlyModelViewSet):
    """Публичный список слотов с фильтрами по ресурсу и дате."""

    queryset = Slot.objects.select_related("resource").order_by("start_time", "id")
    serializer_class = SlotSerializer
    permission_classes = [permissions.AllowAny]
    filterset_class = SlotFilterSet


class SlotGenerationView(APIView):
    """Перегенерация слотов ресурса за диапазон дат (владелец или персонал)."""

    permission_classes = [permissions.IsAuthenticated, IsResourceOwnerOrAdmin]

    def post(self, request):  # type: ignore
        serializer = SlotGenerationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        resource = get_object_or_404(Resource, pk=data["resourceId"])
        self.check_object_permissions(request, resource)

        try:
            date_range = DateRange(data["startDate"], data["endDate"])
        except ValueError as e:
            raise errors.ValidationError(str(e))

        created = regenerate_slots(
            resource.pk,
            date_range,
            duration_minutes=data.get("slotDurationMinutes"),
        )
        return Response({"slotsCreated": created}, status=status.HTTP_200_OK)
