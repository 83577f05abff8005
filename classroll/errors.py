"""Custom exception classes for the application."""


class AppError(Exception):
    """Base application error class."""

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


class AccessDenied(AppError):
    """Raised when the current role may not perform an operation."""

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


class StoreError(AppError):
    """Raised when a Firestore read, write or query fails."""

    def __init__(self, message="A database error occurred. Please try again."):
        """Initialize the error."""
        super().__init__(message, 503)


class NotAuthenticated(AppError):
    """Raised when an operation needs a signed-in user."""

    def __init__(self, message="Please sign in to continue."):
        """Initialize the error."""
        super().__init__(message, 401)
