"""Product domain exceptions.

Raised by the entity and the Service Layer when business rules are
violated.  Views never catch them: the DRF exception handler in
``modules.core.exception_handler`` renders them using ``status_code``,
``error_code`` and ``response_fields()``.

Status mapping:
- ``ProductValidationError`` -> 400
- ``ProductNotFound`` -> 404
- ``InsufficientStock`` -> 409
- ``StockOperationError`` -> its cause's status when the cause is a
  product error, 500 otherwise.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from modules.core.exceptions import DomainError


class ProductServiceError(DomainError):
    """Base class for every error raised by the product module."""

    error_code = "PRODUCT_SERVICE_ERROR"
    details = "Product service error."


class ProductValidationError(ProductServiceError):
    """Input rejected before any persistence attempt.

    ``field`` names the offending attribute or parameter when known.
    """

    status_code = 400
    error_code = "PRODUCT_VALIDATION_ERROR"
    details = "The product data is not valid."

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field

    def response_fields(self) -> Dict[str, Any]:
        return {"field": self.field}

    @classmethod
    def empty_name(cls) -> ProductValidationError:
        return cls("Product name must not be empty.", field="name")

    @classmethod
    def invalid_price(cls, price: Any) -> ProductValidationError:
        return cls(
            f"Invalid price: {price}. Price must be at least 0.01.",
            field="price",
        )

    @classmethod
    def negative_stock(cls, stock: int) -> ProductValidationError:
        return cls(f"Stock cannot be negative: {stock}.", field="stock")

    @classmethod
    def invalid_price_range(cls) -> ProductValidationError:
        return cls("Minimum price cannot be greater than maximum price.")


class ProductNotFound(ProductServiceError):
    """The requested product does not exist."""

    status_code = 404
    error_code = "PRODUCT_NOT_FOUND"
    details = "The requested product does not exist."

    def __init__(self, product_id: Any) -> None:
        super().__init__(f"Product {product_id} not found.")
        self.product_id = product_id

    def response_fields(self) -> Dict[str, Any]:
        return {"product_id": self.product_id}


class InsufficientStock(ProductServiceError):
    """Not enough stock to satisfy a reduction.

    ``available_stock`` is the stock *before* the rejected operation.
    """

    status_code = 409
    error_code = "INSUFFICIENT_STOCK"
    details = "Not enough stock available to complete the operation."

    def __init__(
        self, product_id: Any, available_stock: int, requested_quantity: int
    ) -> None:
        super().__init__(
            f"Insufficient stock for product {product_id}. "
            f"Available: {available_stock}, requested: {requested_quantity}."
        )
        self.product_id = product_id
        self.available_stock = available_stock
        self.requested_quantity = requested_quantity

    def response_fields(self) -> Dict[str, Any]:
        return {
            "product_id": self.product_id,
            "available_stock": self.available_stock,
            "requested_quantity": self.requested_quantity,
        }


class StockOperationError(ProductServiceError):
    """A stock delta operation failed.

    The original failure is chained (``raise ... from``) and exposed as
    ``cause``.
    """

    status_code = 500
    error_code = "STOCK_OPERATION_ERROR"
    details = "Internal error in the product service."

    REDUCE = "REDUCE"
    INCREASE = "INCREASE"

    def __init__(
        self,
        message: str,
        product_id: Any,
        operation: str,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.product_id = product_id
        self.operation = operation
        self.cause = cause

    def resolve(self) -> DomainError:
        if isinstance(self.cause, ProductServiceError):
            return self.cause.resolve()
        return self

    def response_fields(self) -> Dict[str, Any]:
        return {"product_id": self.product_id, "operation": self.operation}

    @classmethod
    def reduction_failed(
        cls, product_id: Any, cause: BaseException
    ) -> StockOperationError:
        return cls(
            f"Failed to reduce stock of product {product_id}.",
            product_id=product_id,
            operation=cls.REDUCE,
            cause=cause,
        )

    @classmethod
    def increase_failed(
        cls, product_id: Any, cause: BaseException
    ) -> StockOperationError:
        return cls(
            f"Failed to increase stock of product {product_id}.",
            product_id=product_id,
            operation=cls.INCREASE,
            cause=cause,
        )
