"""Product API views.

Exposes the ``ProductService`` via HTTP using a DRF ViewSet.
Views parse path/query values, call the service and serialize the result.
Domain exceptions propagate to ``modules.core.exception_handler``, which
translates them into HTTP status codes; the view never builds error
responses itself.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional, TypeVar

import structlog
from django.conf import settings
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.products.dtos import ProductDraftDTO
from modules.products.exceptions import ProductNotFound, ProductValidationError
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import ProductSerializer
from modules.products.services import ProductService

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def _parse(value: Optional[str], name: str, cast: Callable[[str], T]) -> Optional[T]:
    """Cast a raw path/query value; ``None`` and blanks stay ``None``."""
    if value is None or not value.strip():
        return None
    try:
        return cast(value.strip())
    except (ValueError, TypeError, InvalidOperation):
        raise ProductValidationError(
            f"Invalid value for parameter '{name}': {value}", field=name
        ) from None


def _decimal(value: str) -> Decimal:
    number = Decimal(value)
    if not number.is_finite():
        raise ValueError(value)
    return number


class ProductViewSet(GenericViewSet):
    """ViewSet for Product CRUD and stock operations.

    Uses ``ProductService`` with ``ProductDjangoRepository`` (DIP).
    All ORM access goes through the service/repository layer.
    """

    serializer_class = ProductSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(
            repository=ProductDjangoRepository(),
            low_stock_threshold=settings.LOW_STOCK_THRESHOLD,
        )

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/products"""
        products = self._service.get_all_products()
        return Response(ProductSerializer(products, many=True).data)

    def create(self, request: Request) -> Response:
        """POST /api/products"""
        draft = self._draft_from(request)
        logger.info("product.create_requested", name=draft.name)

        product = self._service.create_product(draft)

        out = ProductSerializer(product)
        return Response(out.data, status=status.HTTP_201_CREATED)

    def retrieve(self, request: Request, pk: Optional[str] = None) -> Response:
        """GET /api/products/{pk}"""
        product_id = _parse(pk, "id", int)
        product = self._service.get_product_by_id(product_id)
        if product is None:
            raise ProductNotFound(product_id)
        return Response(ProductSerializer(product).data)

    def update(self, request: Request, pk: Optional[str] = None) -> Response:
        """PUT /api/products/{pk}"""
        product_id = _parse(pk, "id", int)
        draft = self._draft_from(request)
        logger.info("product.update_requested", product_id=product_id)

        product = self._service.update_product(product_id, draft)

        return Response(ProductSerializer(product).data)

    def destroy(self, request: Request, pk: Optional[str] = None) -> Response:
        """DELETE /api/products/{pk}"""
        product_id = _parse(pk, "id", int)
        product = self._service.delete_product(product_id)

        return Response(
            {
                "success": True,
                "message": "Product deleted successfully.",
                "productId": product_id,
                "deletedProduct": product.name,
                "price": str(product.price),
                "stockAtDeletion": product.stock,
                "timestamp": timezone.now(),
            }
        )

    # ------------------------------------------------------------------
    # Catalog queries
    # ------------------------------------------------------------------

    @action(detail=False, methods=["get"], url_path="search")
    def search(self, request: Request) -> Response:
        """GET /api/products/search?name="""
        products = self._service.search_products_by_name(
            request.query_params.get("name")
        )
        return Response(ProductSerializer(products, many=True).data)

    @action(detail=False, methods=["get"], url_path="available")
    def available(self, request: Request) -> Response:
        """GET /api/products/available"""
        products = self._service.get_available_products()
        return Response(ProductSerializer(products, many=True).data)

    @action(detail=False, methods=["get"], url_path="price-range")
    def price_range(self, request: Request) -> Response:
        """GET /api/products/price-range?minPrice=&maxPrice="""
        params = request.query_params
        products = self._service.get_products_by_price_range(
            _parse(params.get("minPrice"), "minPrice", _decimal),
            _parse(params.get("maxPrice"), "maxPrice", _decimal),
        )
        return Response(ProductSerializer(products, many=True).data)

    @action(detail=False, methods=["get"], url_path="low-stock")
    def low_stock(self, request: Request) -> Response:
        """GET /api/products/low-stock?threshold=10"""
        threshold = _parse(request.query_params.get("threshold"), "threshold", int)
        products = self._service.get_low_stock_products(threshold)
        return Response(ProductSerializer(products, many=True).data)

    @action(detail=False, methods=["get"], url_path="stats/total")
    def stats_total(self, request: Request) -> Response:
        """GET /api/products/stats/total"""
        return Response(self._service.get_total_products())

    @action(detail=False, methods=["get"], url_path="stats/available")
    def stats_available(self, request: Request) -> Response:
        """GET /api/products/stats/available"""
        return Response(self._service.get_available_products_count())

    # ------------------------------------------------------------------
    # Stock operations
    # ------------------------------------------------------------------

    @action(detail=True, methods=["put"], url_path="reduce-stock")
    def reduce_stock(self, request: Request, pk: Optional[str] = None) -> Response:
        """PUT /api/products/{pk}/reduce-stock?quantity="""
        product_id = _parse(pk, "id", int)
        quantity = _parse(request.query_params.get("quantity"), "quantity", int)
        logger.info(
            "product.stock_reduction_requested",
            product_id=product_id,
            quantity=quantity,
        )

        success = self._service.reduce_stock(product_id, quantity)

        return Response(
            {
                "success": success,
                "message": "Stock reduced successfully.",
                "productId": product_id,
                "quantityReduced": quantity,
                "timestamp": timezone.now(),
            }
        )

    @action(detail=True, methods=["put"], url_path="increase-stock")
    def increase_stock(self, request: Request, pk: Optional[str] = None) -> Response:
        """PUT /api/products/{pk}/increase-stock?quantity="""
        product_id = _parse(pk, "id", int)
        quantity = _parse(request.query_params.get("quantity"), "quantity", int)
        logger.info(
            "product.stock_increase_requested",
            product_id=product_id,
            quantity=quantity,
        )

        success = self._service.increase_stock(product_id, quantity)

        return Response(
            {
                "success": success,
                "message": "Stock increased successfully.",
                "productId": product_id,
                "quantityAdded": quantity,
                "timestamp": timezone.now(),
            }
        )

    @action(detail=True, methods=["get"], url_path="check-stock")
    def check_stock(self, request: Request, pk: Optional[str] = None) -> Response:
        """GET /api/products/{pk}/check-stock?quantity="""
        product_id = _parse(pk, "id", int)
        quantity = _parse(request.query_params.get("quantity"), "quantity", int)
        return Response(self._service.has_enough_stock(product_id, quantity))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _draft_from(request: Request) -> ProductDraftDTO:
        data: Any = request.data
        if not isinstance(data, dict):
            raise ProductValidationError("Product data must be a JSON object.")
        return ProductDraftDTO.model_validate(data)
