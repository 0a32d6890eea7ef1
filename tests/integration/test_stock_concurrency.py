"""Concurrent stock reductions must never oversell.

Needs a backend with row locks (``SELECT ... FOR UPDATE``); skipped on
SQLite.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest
from django.db import connection
from django.test import TransactionTestCase, skipUnlessDBFeature

from modules.products.exceptions import StockOperationError
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import ProductService

pytestmark = pytest.mark.integration


@skipUnlessDBFeature("has_select_for_update")
class TestConcurrentStockReduction(TransactionTestCase):
    def _reduce(self, product_id: int) -> bool:
        service = ProductService(repository=ProductDjangoRepository())
        try:
            return service.reduce_stock(product_id, 1)
        except StockOperationError:
            return False
        finally:
            connection.close()

    def test_parallel_reductions_never_oversell(self):
        product = Product.objects.create(
            name="Contended", price=Decimal("1.00"), stock=5
        )

        with ThreadPoolExecutor(max_workers=10) as pool:
            results = list(pool.map(self._reduce, [product.pk] * 10))

        product.refresh_from_db()
        assert results.count(True) == 5
        assert product.stock == 0
