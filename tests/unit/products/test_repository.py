"""Integration-style unit tests for ProductDjangoRepository.

These hit the test database through the ORM; they check the query
semantics the service relies on rather than the ORM itself.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def repo():
    return ProductDjangoRepository()


@pytest.fixture()
def catalog(make_product):
    return {
        "widget": make_product(name="Blue Widget", price=Decimal("10.00"), stock=0),
        "gadget": make_product(name="Gadget", price=Decimal("20.00"), stock=5),
        "gizmo": make_product(name="Gizmo Widget", price=Decimal("30.00"), stock=10),
    }


class TestCrud:
    def test_save_assigns_id(self, repo):
        product = Product(name="New", price=Decimal("1.00"), stock=1)
        saved = repo.save(product)
        assert saved.pk is not None
        assert Product.objects.filter(pk=saved.pk).exists()

    def test_save_updates_existing_row(self, repo, make_product):
        product = make_product()
        product.set_stock(99)
        repo.save(product)
        assert Product.objects.get(pk=product.pk).stock == 99

    def test_get_by_id(self, repo, make_product):
        product = make_product()
        assert repo.get_by_id(product.pk) == product

    @pytest.mark.parametrize("bad_id", [999999, "not-a-number", None])
    def test_get_by_id_returns_none(self, repo, bad_id):
        assert repo.get_by_id(bad_id) is None

    def test_get_for_update_returns_product(self, repo, make_product):
        product = make_product()
        assert repo.get_for_update(product.pk) == product

    def test_get_for_update_missing_returns_none(self, repo):
        assert repo.get_for_update(424242) is None

    def test_delete_removes_row(self, repo, make_product):
        product = make_product()
        assert repo.delete(product.pk) is True
        assert not Product.objects.filter(pk=product.pk).exists()

    def test_delete_missing_returns_false(self, repo):
        assert repo.delete(424242) is False

    def test_list_without_filters_returns_all(self, repo, catalog):
        assert len(repo.list()) == 3

    def test_list_with_filters(self, repo, catalog):
        assert repo.list({"stock__gt": 5}) == [catalog["gizmo"]]


class TestCatalogQueries:
    def test_search_by_name_matches_substring(self, repo, catalog):
        names = {p.name for p in repo.search_by_name("Widget")}
        assert names == {"Blue Widget", "Gizmo Widget"}

    def test_search_by_name_no_match(self, repo, catalog):
        assert repo.search_by_name("Sprocket") == []

    def test_list_available_excludes_zero_stock(self, repo, catalog):
        names = {p.name for p in repo.list_available()}
        assert names == {"Gadget", "Gizmo Widget"}

    def test_price_range_is_inclusive(self, repo, catalog):
        names = {
            p.name for p in repo.list_by_price_range(Decimal("10.00"), Decimal("20.00"))
        }
        assert names == {"Blue Widget", "Gadget"}

    def test_low_stock_is_strict(self, repo, catalog):
        names = {p.name for p in repo.list_low_stock(5)}
        assert names == {"Blue Widget"}

    def test_counts(self, repo, catalog):
        assert repo.count_all() == 3
        assert repo.count_available() == 2


class TestHasEnoughStock:
    def test_enough(self, repo, catalog):
        assert repo.has_enough_stock(catalog["gadget"].pk, 5) is True

    def test_not_enough(self, repo, catalog):
        assert repo.has_enough_stock(catalog["gadget"].pk, 6) is False

    def test_unknown_product_returns_none(self, repo):
        assert repo.has_enough_stock(424242, 1) is None
