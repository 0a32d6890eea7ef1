import json
import logging

import pytest
import structlog


def _json_formatter() -> structlog.stdlib.ProcessorFormatter:
    for handler in logging.getLogger().handlers:
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            return handler.formatter
    pytest.fail("JSON console formatter is not configured on the root logger")


class TestStructuredLogging:
    def test_stdlib_records_rendered_as_json(self):
        record = logging.LogRecord(
            "django.request", logging.WARNING, __file__, 1, "plain message", None, None
        )
        payload = json.loads(_json_formatter().format(record))
        assert payload["event"] == "plain message"
        assert payload["level"] == "warning"
        assert payload["logger"] == "django.request"
        assert "timestamp" in payload

    def test_bound_context_merged_into_events(self, caplog):
        structlog.contextvars.bind_contextvars(correlation_id="ctx-123")
        try:
            with caplog.at_level(logging.INFO):
                structlog.get_logger("modules.products").info("product.checked")
        finally:
            structlog.contextvars.clear_contextvars()
        assert any("ctx-123" in record.getMessage() for record in caplog.records)


class TestProductCreationLogging:
    def test_creation_logs_info(self, caplog, make_product):
        with caplog.at_level(logging.INFO, logger="modules.products.models"):
            make_product(name="Logged Product")
        messages = [r.getMessage() for r in caplog.records]
        assert any("product_created" in m for m in messages)

    def test_update_does_not_log_creation(self, caplog, make_product):
        product = make_product()
        caplog.clear()
        with caplog.at_level(logging.INFO, logger="modules.products.models"):
            product.set_name("Renamed")
            product.save()
        assert not any("product_created" in r.getMessage() for r in caplog.records)
