"""URL routing for the slot inventory."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import SlotGenerationView, SlotViewSet

router = SimpleRouter()
router.register(r"", SlotViewSet, basename="slot")

urlpatterns = [
    path("generate/", SlotGenerationView.as_view(), name="slot-generate"),
    path("", include(router.urls)),
]
