"""URL routing for the resources domain."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import PricingRuleViewSet, ResourceViewSet, WeeklyScheduleView

router = SimpleRouter()
router.register(r"", ResourceViewSet, basename="resource")

pricing_rule_list = PricingRuleViewSet.as_view({"get": "list", "post": "create"})
pricing_rule_detail = PricingRuleViewSet.as_view({"delete": "destroy"})

urlpatterns = [
    # Weekly template
    path(
        "<int:resource_id>/schedule/",
        WeeklyScheduleView.as_view(),
        name="resource-schedule",
    ),
    # Pricing rules
    path(
        "<int:resource_id>/pricing-rules/",
        pricing_rule_list,
        name="resource-pricing-rule-list",
    ),
    path(
        "<int:resource_id>/pricing-rules/<int:pk>/",
        pricing_rule_detail,
        name="resource-pricing-rule-detail",
    ),
    path("", include(router.urls)),
]
