"""Base class for domain errors rendered by the API exception handler.

Domain modules subclass ``DomainError`` and declare, like DRF's
``APIException``, a ``status_code`` and an ``error_code``.  The handler in
``modules.core.exception_handler`` never needs to import a domain module.
"""

from __future__ import annotations

from typing import Any, Dict


class DomainError(Exception):
    status_code = 500
    error_code = "DOMAIN_ERROR"
    details = "Domain error."

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def resolve(self) -> DomainError:
        """The error whose status, code and message should be reported."""
        return self

    def response_fields(self) -> Dict[str, Any]:
        """Extra attributes to include in the error response body."""
        return {}
