"""Custom exception classes for the application."""


class AppError(Exception):
    """Base application error class."""

    retryable = False

    def __init__(self, message, status_code=400):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ValidationError(AppError):
    """Raised when user input fails validation."""

    def __init__(self, message="Validation failed."):
        """Initialize the error."""
        super().__init__(message, 400)


class PermissionDeniedError(AppError):
    """Raised when the caller's role does not allow the operation."""

    def __init__(self, message="You are not authorized to perform this action."):
        """Initialize the error."""
        super().__init__(message, 403)


class NotFoundError(AppError):
    """Raised when a resource is not found."""

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class DuplicateResourceError(AppError):
    """Raised when trying to create a resource that already exists."""

    def __init__(self, message="Resource already exists."):
        """Initialize the error."""
        super().__init__(message, 409)


class TransientError(AppError):
    """Raised when the document store could not be reached."""

    retryable = True

    def __init__(self, message="Something went wrong. Please check your connection."):
        """Initialize the error."""
        super().__init__(message, 503)


class ProvisioningError(AppError):
    """Raised by the account-provisioning function.

    The message is shown to the caller exactly as the function produced it.
    """

    STATUS_BY_CODE = {
        "unauthenticated": 401,
        "permission-denied": 403,
        "invalid-argument": 400,
        "already-exists": 409,
        "internal": 500,
    }

    def __init__(self, message, code="internal"):
        """Initialize the error."""
        super().__init__(message, self.STATUS_BY_CODE.get(code, 500))
        self.code = code
