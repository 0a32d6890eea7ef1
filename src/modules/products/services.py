"""Product service layer (Use Cases).

Orchestrates business logic for the Product aggregate, delegating
persistence to the injected ``IProductRepository``.  The service is the
sole holder of cross-field and existence validation.

Business rules enforced here:
- Drafts need a non-blank name (<= 255 chars), an optional description
  (<= 1000 chars), a price the column stores exactly (>= 0.01, two
  decimals) and a stock within the column range.
- Price-range look-ups need both bounds, non-negative, ``min <= max``.
- Stock delta operations lock the row for the whole read-modify-write and
  surface every failure as ``StockOperationError`` chained to its cause.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

import structlog
from django.db import transaction

from modules.products.exceptions import (
    ProductNotFound,
    ProductValidationError,
    StockOperationError,
)
from modules.products.models import (
    DESCRIPTION_MAX_LENGTH,
    NAME_MAX_LENGTH,
    STOCK_MAX,
    Product,
    validate_price,
    validate_stock,
)

if TYPE_CHECKING:
    from modules.products.dtos import ProductDraftDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

DEFAULT_LOW_STOCK_THRESHOLD = 10


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(
        self,
        repository: IProductRepository,
        low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
    ) -> None:
        self._repo = repository
        self._low_stock_threshold = low_stock_threshold

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, draft: Optional[ProductDraftDTO]) -> Product:
        """Validate and persist a new product.

        Raises:
            ProductValidationError: the draft breaks a product rule.
        """
        self._validate_draft(draft)

        product = Product(
            name=draft.name,
            description=draft.description,
            price=draft.price,
            stock=draft.stock,
        )
        product = self._repo.save(product)
        logger.info("product.created", product_id=product.pk, name=product.name)
        return product

    @transaction.atomic
    def update_product(
        self, id: int, draft: Optional[ProductDraftDTO]
    ) -> Product:
        """Overwrite name, description, price and stock of a product.

        ``id`` and ``created_at`` are preserved.

        Raises:
            ProductNotFound: if the product does not exist.
            ProductValidationError: the draft breaks a product rule.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(id)

        self._validate_draft(draft)

        product.set_name(draft.name)
        product.set_description(draft.description)
        product.set_price(draft.price)
        product.set_stock(draft.stock)

        product = self._repo.save(product)
        logger.info("product.updated", product_id=id)
        return product

    @transaction.atomic
    def delete_product(self, id: int) -> Product:
        """Delete a product and return it as it was before deletion.

        Raises:
            ProductNotFound: if the product does not exist.  The repository
                delete is not invoked in that case.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(id)
        if product.stock > 0:
            logger.warning(
                "product.deleting_with_stock", product_id=id, stock=product.stock
            )
        self._repo.delete(id)
        logger.info("product.deleted", product_id=id)
        return product

    # ------------------------------------------------------------------
    # Stock delta operations
    # ------------------------------------------------------------------

    @transaction.atomic
    def reduce_stock(
        self, product_id: Optional[int], quantity: Optional[int]
    ) -> bool:
        """Atomically decrement the stock of a product.

        Raises:
            ProductValidationError: ``product_id`` or ``quantity`` invalid.
            StockOperationError: the operation failed; ``cause`` holds the
                underlying ``ProductNotFound``, ``InsufficientStock`` or
                infrastructure error.
        """
        self._validate_stock_request(product_id, quantity)
        log = logger.bind(product_id=product_id, quantity=quantity)

        try:
            product = self._locked_product(product_id)
            product.reduce_stock(quantity)
            self._repo.save(product)
        except Exception as exc:
            log.warning("product.stock_reduction_failed", reason=str(exc))
            raise StockOperationError.reduction_failed(product_id, exc) from exc

        log.info("product.stock_reduced", remaining=product.stock)
        return True

    @transaction.atomic
    def increase_stock(
        self, product_id: Optional[int], quantity: Optional[int]
    ) -> bool:
        """Atomically increment the stock of a product.

        Raises:
            ProductValidationError: ``product_id`` or ``quantity`` invalid.
            StockOperationError: the operation failed; see ``reduce_stock``.
        """
        self._validate_stock_request(product_id, quantity)
        log = logger.bind(product_id=product_id, quantity=quantity)

        try:
            product = self._locked_product(product_id)
            product.increase_stock(quantity)
            self._repo.save(product)
        except Exception as exc:
            log.warning("product.stock_increase_failed", reason=str(exc))
            raise StockOperationError.increase_failed(product_id, exc) from exc

        log.info("product.stock_increased", remaining=product.stock)
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_all_products(self) -> List[Product]:
        return self._repo.list()

    def get_product_by_id(self, id: int) -> Optional[Product]:
        """Return the product, or ``None`` when it does not exist."""
        return self._repo.get_by_id(id)

    def search_products_by_name(self, name: Optional[str]) -> List[Product]:
        if name is None or not name.strip():
            raise ProductValidationError(
                "Search name must not be empty.", field="name"
            )
        return self._repo.search_by_name(name)

    def get_available_products(self) -> List[Product]:
        return self._repo.list_available()

    def get_products_by_price_range(
        self, min_price: Optional[Decimal], max_price: Optional[Decimal]
    ) -> List[Product]:
        """Products priced within ``[min_price, max_price]`` (inclusive).

        Raises:
            ProductValidationError: a bound is missing or negative, or
                ``min_price > max_price``.
        """
        if min_price is None or max_price is None:
            raise ProductValidationError(
                "Minimum and maximum prices are required."
            )
        if min_price < 0 or max_price < 0:
            raise ProductValidationError("Prices cannot be negative.")
        if min_price > max_price:
            raise ProductValidationError.invalid_price_range()
        return self._repo.list_by_price_range(min_price, max_price)

    def get_low_stock_products(
        self, threshold: Optional[int] = None
    ) -> List[Product]:
        """Products with stock strictly below ``threshold``.

        A missing or negative threshold falls back to the configured
        default (10 unless overridden).
        """
        if threshold is None or threshold < 0:
            threshold = self._low_stock_threshold
        return self._repo.list_low_stock(threshold)

    def has_enough_stock(
        self, product_id: Optional[int], quantity: Optional[int]
    ) -> bool:
        """Unknown products are reported as insufficient, not as errors."""
        self._validate_stock_request(product_id, quantity)
        return bool(self._repo.has_enough_stock(product_id, quantity))

    def get_total_products(self) -> int:
        return self._repo.count_all()

    def get_available_products_count(self) -> int:
        return self._repo.count_available()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _locked_product(self, product_id: int) -> Product:
        product = self._repo.get_for_update(product_id)
        if not product:
            raise ProductNotFound(product_id)
        return product

    @staticmethod
    def _validate_stock_request(
        product_id: Optional[int], quantity: Optional[int]
    ) -> None:
        if product_id is None:
            raise ProductValidationError(
                "Product id must not be null.", field="product_id"
            )
        if quantity is None or quantity <= 0:
            raise ProductValidationError(
                "Quantity must be greater than zero.", field="quantity"
            )
        if quantity > STOCK_MAX:
            raise ProductValidationError(
                f"Quantity cannot exceed {STOCK_MAX}.", field="quantity"
            )

    @staticmethod
    def _validate_draft(draft: Optional[ProductDraftDTO]) -> None:
        if draft is None:
            raise ProductValidationError("Product data must not be null.")

        if draft.name is None or not draft.name.strip():
            raise ProductValidationError.empty_name()
        if draft.price is None:
            raise ProductValidationError("Price is required.", field="price")
        validate_price(draft.price)
        if draft.stock is None:
            raise ProductValidationError("Stock is required.", field="stock")
        validate_stock(draft.stock)
        if len(draft.name) > NAME_MAX_LENGTH:
            raise ProductValidationError(
                f"Name cannot exceed {NAME_MAX_LENGTH} characters.", field="name"
            )
        description = draft.description
        if description is not None and len(description) > DESCRIPTION_MAX_LENGTH:
            raise ProductValidationError(
                f"Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters.",
                field="description",
            )
