"""Business errors raised by the marketplace services."""
from __future__ import annotations


class MarketplaceError(Exception):
    status_code = 400
    code = "invalid"

    def __init__(self, message: str, code: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code


class NotAuthorizedError(MarketplaceError):
    status_code = 403
    code = "unauthorized"


class ProductUnavailableError(MarketplaceError):
    status_code = 404
    code = "not_found"


class ArtisanNotFoundError(MarketplaceError):
    status_code = 404
    code = "not_found"


class InsufficientStockError(MarketplaceError):
    code = "insufficient_stock"


class InvalidRequestError(MarketplaceError):
    """Missing or malformed input for a use case."""
