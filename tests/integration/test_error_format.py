"""Integration tests for the standardized error envelope."""

from unittest.mock import patch

import pytest

pytestmark = pytest.mark.integration

ENVELOPE_KEYS = {
    "success",
    "status",
    "errorCode",
    "message",
    "error",
    "timestamp",
    "path",
}


def _assert_envelope(response, status_code):
    assert response.status_code == status_code
    data = response.json()
    assert ENVELOPE_KEYS <= set(data)
    assert data["success"] is False
    assert data["status"] == status_code
    return data


class TestStandardizedErrors:
    def test_not_found_has_standard_format(self, api_client):
        data = _assert_envelope(api_client.get("/api/products/999"), 404)
        assert data["path"] == "/api/products/999"
        assert data["error"]

    def test_validation_error_has_standard_format(self, api_client):
        response = api_client.post(
            "/api/products", {"name": "   ", "price": "1", "stock": 1}, format="json"
        )
        data = _assert_envelope(response, 400)
        assert data["errorCode"] == "PRODUCT_VALIDATION_ERROR"
        assert data["field"] == "name"

    def test_malformed_json_has_standard_format(self, api_client):
        response = api_client.post(
            "/api/products", data="{", content_type="application/json"
        )
        data = _assert_envelope(response, 400)
        assert data["errorCode"] == "BAD_REQUEST"

    def test_method_not_allowed_has_standard_format(self, api_client):
        data = _assert_envelope(api_client.delete("/api/products"), 405)
        assert data["errorCode"] == "METHOD_NOT_ALLOWED"

    def test_unsupported_media_type_has_standard_format(self, api_client):
        response = api_client.post(
            "/api/products", data="name=x", content_type="text/plain"
        )
        _assert_envelope(response, 415)

    def test_unexpected_error_is_generic_500(self, api_client):
        with patch(
            "modules.products.services.ProductService.get_all_products",
            side_effect=RuntimeError("connection string leaked"),
        ):
            response = api_client.get("/api/products")

        data = _assert_envelope(response, 500)
        assert data["errorCode"] == "INTERNAL_SERVER_ERROR"
        assert "leaked" not in data["message"]

    def test_optional_fields_are_omitted(self, api_client):
        data = _assert_envelope(api_client.get("/api/products/999"), 404)
        assert "field" not in data
        assert "availableStock" not in data
