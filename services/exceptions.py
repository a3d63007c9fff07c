"""Error taxonomy shared by the services and the HTTP layer.

Each error carries the status code and machine-readable code the API
envelope reports; api/errors.py does the translation.
"""


class StorefrontError(Exception):
    status = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(StorefrontError):
    """Malformed identifier, quantity below 1, missing required field."""

    status = 400
    code = "VALIDATION_ERROR"


class NotFoundError(StorefrontError):
    status = 404
    code = "NOT_FOUND"


class ConflictError(StorefrontError):
    """Unique constraint hit (duplicate ISBN). Reported as a 400."""

    status = 400
    code = "CONFLICT"


class AuthorizationError(StorefrontError):
    status = 401
    code = "UNAUTHORIZED"


class StoreError(StorefrontError):
    status = 500
    code = "STORE_ERROR"
