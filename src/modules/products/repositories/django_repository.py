"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: look-ups return ``None``
instead of raising, and the Service Layer decides how to translate a
missing entity into a domain error.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

import structlog

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import BooleanField, Case, Value, When

from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: int) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Product.objects.filter(id=id).first()
        except (ValueError, TypeError, ValidationError):
            return None

    def get_for_update(self, id: int) -> Optional[Product]:
        try:
            return Product.objects.select_for_update().filter(id=id).first()
        except (ValueError, TypeError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        """List products with optional Django ORM look-ups.

        Examples of valid filters::

            {"stock__gt": 0}
            {"name__contains": "Widget"}
        """
        queryset = Product.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product."""
        entity.save()
        logger.info("product.saved", product_id=entity.pk)
        return entity

    @transaction.atomic
    def delete(self, id: int) -> bool:
        """Delete a product by ID.

        Returns ``True`` if the product was found and deleted,
        ``False`` if no product exists with the given ID.
        """
        product = self.get_by_id(id)
        if not product:
            return False
        product.delete()
        logger.info("product.deleted", product_id=id)
        return True

    # ------------------------------------------------------------------
    # Catalog queries
    # ------------------------------------------------------------------

    def search_by_name(self, fragment: str) -> List[Product]:
        return self.list({"name__contains": fragment})

    def list_available(self) -> List[Product]:
        return self.list({"stock__gt": 0})

    def list_by_price_range(
        self, min_price: Decimal, max_price: Decimal
    ) -> List[Product]:
        return self.list({"price__range": (min_price, max_price)})

    def list_low_stock(self, threshold: int) -> List[Product]:
        return self.list({"stock__lt": threshold})

    def count_all(self) -> int:
        return Product.objects.count()

    def count_available(self) -> int:
        return Product.objects.filter(stock__gt=0).count()

    def has_enough_stock(self, id: int, quantity: int) -> Optional[bool]:
        """Single query: ``None`` if no row, else ``stock >= quantity``."""
        try:
            return (
                Product.objects.filter(id=id)
                .annotate(
                    enough=Case(
                        When(stock__gte=quantity, then=Value(True)),
                        default=Value(False),
                        output_field=BooleanField(),
                    )
                )
                .values_list("enough", flat=True)
                .first()
            )
        except (ValueError, TypeError, ValidationError):
            return None
