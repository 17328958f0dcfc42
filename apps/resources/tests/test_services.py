from datetime import time
from decimal import Decimal
from unittest import mock

import pytest
from django.contrib.auth import get_user_model
from django.db import DatabaseError

from apps.resources.models import PricingRule, Resource
from apps.resources.services import (
    MSG_NO_COMPLETE_RULE,
    PricingRuleDraft,
    normalize_wall_clock,
    save_pricing_rules,
)
from shared.domain import errors


@pytest.fixture
def resource():
    owner = get_user_model().objects.create_user(username="owner", password="pass")
    return Resource.objects.create(owner=owner, name="Court 1", base_price=Decimal("100.00"))


def draft(**kwargs):
    values = {"rule_name": "Peak", "price_override": "150", "start_time": "18:00", "end_time": "22:00"}
    values.update(kwargs)
    return PricingRuleDraft(**values)


def test_wall_clock_normalization():
    assert normalize_wall_clock("09:00") == time(9)
    assert normalize_wall_clock("09:00:30") == time(9, 0, 30)
    with pytest.raises(errors.ValidationError):
        normalize_wall_clock("9 am")


@pytest.mark.django_db
def test_rules_keep_batch_order(resource):
    saved = save_pricing_rules(resource, [draft(rule_name="A"), draft(rule_name="B"), draft(rule_name="C")])

    assert [rule.rule_name for rule in saved] == ["A", "B", "C"]
    assert list(PricingRule.objects.order_by("id").values_list("rule_name", flat=True)) == ["A", "B", "C"]


@pytest.mark.django_db
def test_incomplete_drafts_are_skipped(resource):
    saved = save_pricing_rules(resource, [draft(end_time=""), draft(rule_name="Kept")])

    assert [rule.rule_name for rule in saved] == ["Kept"]


@pytest.mark.django_db
def test_no_complete_draft(resource):
    with pytest.raises(errors.ValidationError) as excinfo:
        save_pricing_rules(resource, [draft(price_override=""), PricingRuleDraft()])

    assert excinfo.value.message == MSG_NO_COMPLETE_RULE
    assert not PricingRule.objects.exists()


@pytest.mark.django_db
def test_malformed_price_is_rejected(resource):
    with pytest.raises(errors.ValidationError):
        save_pricing_rules(resource, [draft(price_override="cheap")])


@pytest.mark.django_db
def test_empty_window_is_saved_with_warning(resource):
    with mock.patch("apps.resources.services.logger") as logger:
        saved = save_pricing_rules(resource, [draft(start_time="22:00", end_time="02:00")])

    assert len(saved) == 1
    assert "will never match" in logger.warning.call_args[0][0]


@pytest.mark.django_db
def test_storage_error_is_reported(resource):
    with mock.patch.object(PricingRule, "save", side_effect=DatabaseError("read only")):
        with pytest.raises(errors.StorageFailure):
            save_pricing_rules(resource, [draft()])
