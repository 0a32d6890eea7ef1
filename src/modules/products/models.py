"""Product model with self-validating mutators and stock control.

Business rules implemented:
- Name is required, at most 255 characters (checked by the service).
- Description is optional, at most 1000 characters (checked by the service).
- Price is at least 0.01, with at most 8 integer digits and 2 decimal
  places (mutator + field validator + DB constraint).
- Stock is between 0 and the 32-bit column maximum (mutators + DB
  constraint).
- Every mutator stamps ``updated_at``.

Mutators raise domain exceptions from ``modules.products.exceptions``
at the point of mutation, never at serialization time.  Assigning the
fields directly bypasses validation and is reserved for the ORM.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

import structlog

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.products.exceptions import InsufficientStock, ProductValidationError

logger = structlog.get_logger(__name__)

NAME_MAX_LENGTH = 255
DESCRIPTION_MAX_LENGTH = 1000
PRICE_MAX_DIGITS = 10
PRICE_DECIMAL_PLACES = 2
MIN_PRICE = Decimal("0.01")
MAX_PRICE = Decimal("99999999.99")
STOCK_MAX = 2_147_483_647


def validate_price(price: Optional[Decimal]) -> None:
    """Reject prices the ``price`` column cannot store exactly.

    ``None`` passes; callers decide whether the price is required.
    """
    if price is None:
        return
    if not price.is_finite() or price < MIN_PRICE:
        raise ProductValidationError.invalid_price(price)
    if price > MAX_PRICE:
        raise ProductValidationError(
            f"Price cannot exceed {MAX_PRICE}.", field="price"
        )
    if price != price.quantize(MIN_PRICE):
        raise ProductValidationError(
            f"Price cannot have more than {PRICE_DECIMAL_PLACES} decimal places.",
            field="price",
        )


def validate_stock(stock: Optional[int]) -> None:
    if stock is None:
        return
    if stock < 0:
        raise ProductValidationError.negative_stock(stock)
    if stock > STOCK_MAX:
        raise ProductValidationError(
            f"Stock cannot exceed {STOCK_MAX}.", field="stock"
        )


class Product(BaseModel):
    """Product aggregate root.

    ``id`` is assigned by the database on first save and never changes.
    """

    name = models.CharField(max_length=NAME_MAX_LENGTH)
    description = models.TextField(  # noqa: DJ01
        max_length=DESCRIPTION_MAX_LENGTH, null=True, blank=True, default=None
    )
    price = models.DecimalField(
        max_digits=PRICE_MAX_DIGITS,
        decimal_places=PRICE_DECIMAL_PLACES,
        validators=[MinValueValidator(MIN_PRICE)],
    )
    stock = models.IntegerField(default=0)

    class Meta:
        db_table = "products"
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gt=0),
                name="products_price_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(stock__gte=0),
                name="products_stock_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def set_name(self, name: Optional[str]) -> None:
        self.name = name
        self.touch()

    def set_description(self, description: Optional[str]) -> None:
        self.description = description
        self.touch()

    def set_price(self, price: Optional[Decimal]) -> None:
        """Set the price; ``None`` is accepted as "unset"."""
        validate_price(price)
        self.price = price
        self.touch()

    def set_stock(self, stock: Optional[int]) -> None:
        """Set the stock; ``None`` is accepted as "unset"."""
        validate_stock(stock)
        self.stock = stock
        self.touch()

    # ------------------------------------------------------------------
    # Stock delta operations
    # ------------------------------------------------------------------

    def reduce_stock(self, quantity: Optional[int]) -> None:
        """Decrement stock by ``quantity``.

        Raises:
            ProductValidationError: ``quantity`` is missing or not positive.
            InsufficientStock: ``quantity`` exceeds the current stock.  Stock
                is left unchanged.
        """
        if quantity is None or quantity <= 0:
            raise ProductValidationError(
                "Quantity must be greater than zero.", field="quantity"
            )
        if quantity > self.stock:
            raise InsufficientStock(self.pk, self.stock, quantity)

        self.stock -= quantity
        self.touch()

    def increase_stock(self, quantity: Optional[int]) -> None:
        """Increment stock by ``quantity``.

        Raises:
            ProductValidationError: ``quantity`` is missing or not positive,
                or the new stock would not fit the column.
        """
        if quantity is None or quantity <= 0:
            raise ProductValidationError(
                "Quantity must be greater than zero.", field="quantity"
            )
        if quantity > STOCK_MAX - self.stock:
            raise ProductValidationError(
                f"Stock cannot exceed {STOCK_MAX}.", field="quantity"
            )

        self.stock += quantity
        self.touch()

    def has_enough_stock(self, quantity: Optional[int]) -> bool:
        return quantity is not None and quantity > 0 and self.stock >= quantity

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.price is not None and self.price < MIN_PRICE:
            raise ValidationError({"price": f"Price must be at least {MIN_PRICE}."})
        if self.stock is not None and self.stock < 0:
            raise ValidationError({"stock": "Stock cannot be negative."})

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "product_created",
                product_id=self.pk,
                name=self.name,
            )

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.pk} - {self.name}"
