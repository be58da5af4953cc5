"""Errors raised by the catalogue service and rendered as ``{"error": ...}``."""

from __future__ import annotations


class CatalogError(Exception):
    """Base class carrying the HTTP status and the public message."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(CatalogError):
    status_code = 404


class BadRequestError(CatalogError):
    status_code = 400


class ServiceFault(CatalogError):
    """Unexpected failure; ``message`` is generic and safe to return."""

    status_code = 500


__all__ = ["CatalogError", "NotFoundError", "BadRequestError", "ServiceFault"]
