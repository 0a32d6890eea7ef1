"""Product repository interface.

Extends ``IRepository[Product]`` with the catalog queries and the
row-locking look-up used by stock delta operations.  Query semantics are
part of the contract:

- ``search_by_name``: substring match on ``name`` (case sensitivity follows
  the store's ``LIKE``).
- ``list_available`` / ``count_available``: ``stock > 0``.
- ``list_by_price_range``: ``min_price <= price <= max_price`` (inclusive).
- ``list_low_stock``: ``stock < threshold`` (strict).
"""

from __future__ import annotations

from abc import abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def get_for_update(self, id: int) -> Optional["Product"]:
        """Retrieve a product with a row-level lock (SELECT FOR UPDATE).

        Must run inside a transaction.  Returns ``None`` if the product
        does not exist.
        """

    @abstractmethod
    def search_by_name(self, fragment: str) -> List["Product"]:
        """Products whose name contains ``fragment``."""

    @abstractmethod
    def list_available(self) -> List["Product"]:
        """Products with stock greater than zero."""

    @abstractmethod
    def list_by_price_range(
        self, min_price: Decimal, max_price: Decimal
    ) -> List["Product"]:
        """Products priced within ``[min_price, max_price]``."""

    @abstractmethod
    def list_low_stock(self, threshold: int) -> List["Product"]:
        """Products with stock strictly below ``threshold``."""

    @abstractmethod
    def count_all(self) -> int:
        """Total number of products."""

    @abstractmethod
    def count_available(self) -> int:
        """Number of products with stock greater than zero."""

    @abstractmethod
    def has_enough_stock(self, id: int, quantity: int) -> Optional[bool]:
        """Whether product ``id`` holds at least ``quantity`` units.

        Returns ``None`` when no product matches ``id``.
        """
