"""
Error types raised by the product preview engine.

Only two failures escape the engine: a URL that cannot be fetched at all
(client error) and a fetch that did not produce a page (gateway error).
A page that yields no usable data is not an error.
"""
from typing import Optional


class ProductDataError(Exception):
    """Base error carrying the HTTP status the caller should map it to."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InvalidProductUrlError(ProductDataError):
    """URL does not parse or does not use http/https."""

    status_code = 400


class FetchFailedError(ProductDataError):
    """Timeout, connection error, redirect exhaustion or a non-2xx/3xx status."""

    status_code = 502
