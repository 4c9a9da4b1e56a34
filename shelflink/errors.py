"""
Exceptions raised by ShelfLink services.

The API layer translates these into structured error responses.
"""


class ShelfLinkException(Exception):
    """Base exception for ShelfLink errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        detail: str = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)


class NotFoundError(ShelfLinkException):
    """Resource not found."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            message=f"{resource} not found",
            code="NOT_FOUND",
            status_code=404,
            detail=f"No {resource} with identifier '{identifier}' exists",
        )


class ValidationError(ShelfLinkException):
    """Input validation failed."""

    def __init__(self, message: str, detail: str = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
            detail=detail,
        )


class AuthenticationError(ShelfLinkException):
    """No authenticated user on the request."""

    def __init__(self, detail: str = None):
        super().__init__(
            message="Authentication required",
            code="UNAUTHENTICATED",
            status_code=401,
            detail=detail,
        )


class ProcessingError(ShelfLinkException):
    """Error during processing."""

    def __init__(self, message: str, detail: str = None):
        super().__init__(
            message=message,
            code="PROCESSING_ERROR",
            status_code=500,
            detail=detail,
        )
