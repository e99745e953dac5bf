"""
Error classes shared by the services and the GraphQL resolvers.

The GraphQL executor copies an exception's ``extensions`` attribute into
the error entry it returns, so clients receive a stable ``code`` next to
the message (the same codes Apollo clients already understand).
"""

from typing import Any


class CatalogError(Exception):
    """Base class for errors reported to GraphQL clients."""

    code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str, **extensions: Any):
        super().__init__(message)
        self.message = message
        self.extensions = {"code": self.code, **extensions}


class AuthenticationError(CatalogError):
    """Raised when an operation needs a caller identity that is missing or invalid."""

    code = "UNAUTHENTICATED"


class ValidationError(CatalogError):
    """
    Raised when mutation input is malformed or conflicts with stored data.

    Pass ``invalid_args`` to echo the offending arguments back to the client.
    """

    code = "BAD_USER_INPUT"

    def __init__(self, message: str, invalid_args: dict[str, Any] | None = None):
        if invalid_args is None:
            super().__init__(message)
        else:
            super().__init__(message, invalidArgs=invalid_args)
        self.invalid_args = invalid_args


class StoreValidationError(Exception):
    """Raised by the data access layer when a record fails validation."""

    pass
