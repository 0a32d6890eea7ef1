"""Product DRF serializers for API output.

The serializer operates at the Interface layer (API Views) and only
renders entities.  Input goes through ``ProductDraftDTO`` and the
Service Layer, which owns validation.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    """Read-only wire representation of a Product."""

    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "price",
            "stock",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = ["id", "name", "description", "price", "stock"]
