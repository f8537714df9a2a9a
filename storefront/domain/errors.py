# storefront/domain/errors.py
"""
Domain errors raised by the service layer.

Each kind carries the HTTP status the routers answer with, the response body
is always ``{"detail": <message>}``.
"""


class StorefrontError(Exception):
    status_code = 400


class NotFoundError(StorefrontError):
    status_code = 404


class ConflictError(StorefrontError):
    status_code = 409


class ForbiddenError(StorefrontError):
    status_code = 403


class UnauthorizedError(StorefrontError):
    status_code = 401


class InvalidStateError(StorefrontError):
    status_code = 400


class ValidationError(StorefrontError):
    status_code = 422
