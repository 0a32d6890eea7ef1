"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
``ProductDraftDTO`` is the contract between the API layer (Views) and the
Service layer for both creation and full updates.  DTOs are immutable
(``frozen=True``).

The DTO only coerces wire types (``"9.99"`` -> ``Decimal``).  Business
rules (required fields, lengths, positivity) belong to ``ProductService``
so that every rejection surfaces as a ``ProductValidationError`` naming
the offending field.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ProductDraftDTO(BaseModel):
    """Immutable candidate product state supplied by a client.

    Server-managed fields (``id``, ``createdAt``, ``updatedAt``) are
    ignored if present in the request body.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = None
    stock: Optional[int] = None
