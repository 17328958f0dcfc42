"""Integration tests for slot generation and listing endpoints."""

from __future__ import annotations

from datetime import time
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.resources.models import PricingRule, Resource, WeeklyScheduleRule
from apps.slots.models import Slot

User = get_user_model()


class SlotGenerationAPITests(APITestCase):
    def setUp(self) -> None:
        self.owner = User.objects.create_user(username="owner", password="OwnerPass123")
        self.stranger = User.objects.create_user(username="stranger", password="StrangerPass123")
        self.resource = Resource.objects.create(
            owner=self.owner,
            name="Court 1",
            base_price=Decimal("100.00"),
        )
        WeeklyScheduleRule.objects.create(
            resource=self.resource,
            day_of_week=1,
            is_open=True,
            open_time=time(9),
            close_time=time(11),
        )
        self.url = reverse("slot-generate")
        self.client.force_authenticate(self.owner)

    def _payload(self, **overrides):  # type: ignore
        payload = {
            "resourceId": self.resource.id,
            "startDate": "2024-06-03",
            "endDate": "2024-06-09",
        }
        payload.update(overrides)
        return payload

    def test_owner_generates_slots(self) -> None:
        PricingRule.objects.create(
            resource=self.resource,
            rule_name="Morning",
            start_time=time(9),
            end_time=time(10),
            price_override=Decimal("150.00"),
        )

        response = self.client.post(self.url, self._payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data, {"slotsCreated": 2})
        prices = list(Slot.objects.order_by("start_time").values_list("price", flat=True))
        self.assertEqual(prices, [Decimal("150.00"), Decimal("100.00")])

    def test_explicit_duration(self) -> None:
        response = self.client.post(self.url, self._payload(slotDurationMinutes=30), format="json")

        self.assertEqual(response.data, {"slotsCreated": 4})

    def test_invalid_input(self) -> None:
        inverted = self.client.post(self.url, self._payload(endDate="2024-06-01"), format="json")
        zero = self.client.post(self.url, self._payload(slotDurationMinutes=0), format="json")
        missing = self.client.post(self.url, {"startDate": "2024-06-03"}, format="json")

        self.assertEqual(inverted.status_code, status.HTTP_400_BAD_REQUEST, inverted.data)
        self.assertEqual(zero.status_code, status.HTTP_400_BAD_REQUEST, zero.data)
        self.assertEqual(missing.status_code, status.HTTP_400_BAD_REQUEST, missing.data)
        self.assertFalse(Slot.objects.exists())

    def test_last_representable_date_is_rejected(self) -> None:
        response = self.client.post(
            self.url,
            self._payload(startDate="9999-12-31", endDate="9999-12-31"),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertIn("endDate", response.data)

    @override_settings(SLOT_MAX_GENERATION_DAYS=7)
    def test_range_longer_than_limit_is_rejected(self) -> None:
        within = self.client.post(self.url, self._payload(), format="json")
        beyond = self.client.post(self.url, self._payload(endDate="2024-06-10"), format="json")

        self.assertEqual(within.status_code, status.HTTP_200_OK, within.data)
        self.assertEqual(beyond.status_code, status.HTTP_400_BAD_REQUEST, beyond.data)
        self.assertIn("endDate", beyond.data)

    def test_unknown_resource(self) -> None:
        response = self.client.post(self.url, self._payload(resourceId=self.resource.id + 10), format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND, response.data)

    def test_stranger_cannot_generate(self) -> None:
        self.client.force_authenticate(self.stranger)

        response = self.client.post(self.url, self._payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, response.data)
        self.assertFalse(Slot.objects.exists())


class SlotListAPITests(APITestCase):
    def setUp(self) -> None:
        owner = User.objects.create_user(username="owner", password="OwnerPass123")
        self.resource = Resource.objects.create(owner=owner, name="Court 1", base_price=Decimal("100.00"))
        self.other = Resource.objects.create(owner=owner, name="Court 2", base_price=Decimal("80.00"))
        for resource in (self.resource, self.other):
            for weekday in (1, 2):
                WeeklyScheduleRule.objects.create(
                    resource=resource,
                    day_of_week=weekday,
                    is_open=True,
                    open_time=time(9),
                    close_time=time(11),
                )
        self.client.force_authenticate(owner)
        for resource in (self.resource, self.other):
            response = self.client.post(
                reverse("slot-generate"),
                {"resourceId": resource.id, "startDate": "2024-06-03", "endDate": "2024-06-04"},
                format="json",
            )
            self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.client.force_authenticate(None)
        self.url = reverse("slot-list")

    def test_filter_by_resource_and_date(self) -> None:
        response = self.client.get(self.url, {"resource": self.resource.id, "date": "2024-06-04"})

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(len(response.data), 2)
        self.assertTrue(all(item["resource"] == self.resource.id for item in response.data))
        self.assertTrue(all(item["schedule_date"] == "2024-06-04" for item in response.data))

    def test_filter_by_range_and_booked_flag(self) -> None:
        first = Slot.objects.filter(resource=self.resource).order_by("start_time").first()
        Slot.objects.filter(pk=first.pk).update(is_booked=True)

        response = self.client.get(
            self.url,
            {"resource": self.resource.id, "start": "2024-06-03", "end": "2024-06-04", "is_booked": "false"},
        )

        self.assertEqual(len(response.data), 3)
        self.assertNotIn(first.id, [item["id"] for item in response.data])
