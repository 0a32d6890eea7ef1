"""Unit tests for BaseModel timestamp bookkeeping.

Exercised through ``Product``, the concrete model of the service.
"""

from __future__ import annotations

from datetime import datetime, timezone as dt_timezone
from decimal import Decimal

import pytest
from freezegun import freeze_time

from modules.products.models import Product

pytestmark = pytest.mark.unit


def _new_product() -> Product:
    return Product(name="Clock", price=Decimal("1.00"), stock=1)


class TestBaseModel:
    def test_timestamps_equal_on_create(self):
        product = _new_product()
        product.save()
        assert product.created_at is not None
        assert product.created_at == product.updated_at

    def test_timestamps_come_from_the_clock(self):
        with freeze_time("2026-01-01 12:00:00"):
            product = _new_product()
            product.save()
        expected = datetime(2026, 1, 1, 12, 0, tzinfo=dt_timezone.utc)
        assert product.created_at == expected
        assert product.updated_at == expected

    def test_updated_at_changes_on_save(self):
        with freeze_time("2026-01-01 12:00:00"):
            product = _new_product()
            product.save()
        with freeze_time("2026-01-01 12:05:00"):
            product.name = "Modified"
            product.save()
        product.refresh_from_db()
        assert product.updated_at > product.created_at

    def test_created_at_does_not_change_on_save(self):
        with freeze_time("2026-01-01 12:00:00"):
            product = _new_product()
            product.save()
        original_created = product.created_at
        with freeze_time("2026-01-02 12:00:00"):
            product.save()
        product.refresh_from_db()
        assert product.created_at == original_created

    def test_save_with_update_fields_includes_updated_at(self):
        """The save() guard must inject updated_at into update_fields."""
        with freeze_time("2026-01-01 12:00:00"):
            product = _new_product()
            product.save()
        original_updated = product.updated_at
        with freeze_time("2026-01-01 13:00:00"):
            product.name = "Partial"
            product.save(update_fields=["name"])
        product.refresh_from_db()
        assert product.updated_at > original_updated

    def test_touch_stamps_updated_at_without_saving(self):
        with freeze_time("2026-01-01 12:00:00"):
            product = _new_product()
            product.save()
        with freeze_time("2026-01-01 12:30:00"):
            product.touch()
        assert product.updated_at == datetime(
            2026, 1, 1, 12, 30, tzinfo=dt_timezone.utc
        )
        product.refresh_from_db()
        assert product.updated_at == product.created_at

    def test_created_at_is_not_editable(self):
        field = Product._meta.get_field("created_at")
        assert field.editable is False

    def test_id_assigned_by_database(self):
        product = _new_product()
        assert product.pk is None
        product.save()
        assert isinstance(product.pk, int)
