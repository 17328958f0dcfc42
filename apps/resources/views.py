"""Resource API views."""

from __future__ import annotations

from django.shortcuts import get_object_or_404  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from .models import PricingRule, Resource, WeeklyScheduleRule
from .serializers import (
    PricingRuleBatchSerializer,
    PricingRuleSerializer,
    ResourceSerializer,
    WeeklyScheduleRuleSerializer,
    WeeklyScheduleSerializer,
)
from .services import replace_weekly_schedule, save_pricing_rules


def is_platform_staff(user) -> bool:  # type: ignore
    return bool(getattr(user, "is_staff", False) or getattr(user, "is_superuser", False))


class IsResourceOwnerOrAdmin(permissions.BasePermission):
    """Позволяет управлять ресурсом его владельцу и персоналу платформы."""

    def has_permission(self, request, view):  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        return bool(request.user and request.user.is_authenticated)

    def has_object_permission(self, request, view, obj: Resource):  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        user = request.user
        if not user.is_authenticated:
            return False
        if is_platform_staff(user):
            return True
        return obj.owner_id == user.id


class ResourceViewSet(viewsets.ModelViewSet):
    """Viewset для управления ресурсами бизнеса."""

    queryset = Resource.objects.select_related("owner").all()
    serializer_class = ResourceSerializer
    permission_classes = [IsResourceOwnerOrAdmin]

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        user = self.request.user
        if self.request.method not in permissions.SAFE_METHODS and user.is_authenticated:
            if is_platform_staff(user):
                return qs
            return qs.filter(owner=user)
        return qs.filter(is_active=True)

    def perform_create(self, serializer):  # type: ignore
        serializer.save(owner=self.request.user)


class ResourceTemplateMixin:
    """Вспомогательный миксин: загружает ресурс из URL и проверяет права."""

    resource_lookup_url_kwarg = "resource_id"
    permission_classes = [IsResourceOwnerOrAdmin]

    def initial(self, request, *args, **kwargs):  # type: ignore
        super().initial(request, *args, **kwargs)
        resource_id = kwargs.get(self.resource_lookup_url_kwarg)
        self.resource_object = get_object_or_404(Resource, pk=resource_id)
        self.check_object_permissions(request, self.resource_object)

    def get_resource(self) -> Resource:
        return self.resource_object


class WeeklyScheduleView(ResourceTemplateMixin, APIView):
    """Просмотр и изменение недельного расписания ресурса."""

    def get(self, request, resource_id):  # type: ignore
        rules = WeeklyScheduleRule.objects.filter(resource=self.get_resource()).order_by("day_of_week")
        serializer = WeeklyScheduleRuleSerializer(rules, many=True)
        return Response({"resource_id": self.get_resource().id, "days": serializer.data})

    def put(self, request, resource_id):  # type: ignore
        serializer = WeeklyScheduleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        replace_weekly_schedule(self.get_resource(), serializer.validated_data["days"])
        return self.get(request, resource_id)


class PricingRuleViewSet(ResourceTemplateMixin, viewsets.GenericViewSet):
    """Тарифные правила ресурса: список, пакетное сохранение, удаление."""

    serializer_class = PricingRuleSerializer
    queryset = PricingRule.objects.all()

    def get_queryset(self):  # type: ignore
        return super().get_queryset().filter(resource=self.get_resource()).order_by("id")

    def list(self, request, resource_id=None):  # type: ignore
        serializer = PricingRuleSerializer(self.get_queryset(), many=True)
        return Response(serializer.data)

    def create(self, request, resource_id=None):  # type: ignore
        batch = PricingRuleBatchSerializer(data=request.data)
        batch.is_valid(raise_exception=True)
        rules = save_pricing_rules(self.get_resource(), batch.drafts())
        serializer = PricingRuleSerializer(rules, many=True)
        return Response(
            {"saved": len(rules), "rules": serializer.data},
            status=status.HTTP_201_CREATED,
        )

    def destroy(self, request, resource_id=None, pk=None):  # type: ignore
        rule = get_object_or_404(self.get_queryset(), pk=pk)
        rule.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
