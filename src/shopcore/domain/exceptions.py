"""Error taxonomy for checkout and the order lifecycle.

Every failure a caller can see derives from ``DomainException`` and
carries a stable ``kind`` (shown as ``[kind]`` by the CLI) plus the HTTP
status an API adapter should answer with.  ``to_dict()`` is the error
body.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""

    kind = "domain_error"
    http_status = 500

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": str(self)}


class ValidationError(DomainException):
    """A request field is missing/malformed or a business rule was violated."""

    kind = "validation_error"
    http_status = 400


class EmptyOrderError(ValidationError):
    """Checkout or pricing was attempted with no line items."""

    kind = "empty_order"


class InvalidStatusError(ValidationError):
    """The requested order status is not recognised (or not reachable)."""

    kind = "invalid_status"


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    kind = "not_found"
    http_status = 404


class OutOfStockError(DomainException):
    """Requested quantity exceeds the product's available stock."""

    kind = "out_of_stock"
    http_status = 409

    def __init__(
        self,
        product_id: str,
        product_name: str,
        requested: int,
        available: int,
    ) -> None:
        super().__init__(
            f"Insufficient stock for {product_name} "
            f"(need {requested}, have {available} available)"
        )
        self.product_id = product_id
        self.product_name = product_name
        self.requested = requested
        self.available = available

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["productId"] = self.product_id
        return data


class UnauthorizedError(DomainException):
    """No verified identity was supplied."""

    kind = "unauthorized"
    http_status = 401


class ForbiddenError(DomainException):
    """The identity is valid but may not access this resource."""

    kind = "forbidden"
    http_status = 403


class ConfigurationError(DomainException):
    """Required infrastructure is missing or misconfigured."""

    kind = "configuration_error"


class InternalError(DomainException):
    """Unexpected failure, typically during persistence."""

    kind = "internal_error"
