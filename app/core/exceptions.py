"""Custom application exceptions."""


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, status_code: int = 500):
        """Initialize exception with message and status code."""
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class NotFoundException(AppException):
    """Resource not found exception."""

    def __init__(self, message: str = "Resource not found"):
        """Initialize with 404 status code."""
        super().__init__(message, status_code=404)


class UnauthorizedException(AppException):
    """Missing or invalid credentials."""

    def __init__(self, message: str = "Not authenticated"):
        """Initialize with 401 status code."""
        super().__init__(message, status_code=401)


class ForbiddenException(AppException):
    """Role or ownership mismatch."""

    def __init__(self, message: str = "Not authorized"):
        """Initialize with 403 status code."""
        super().__init__(message, status_code=403)


class BadRequestException(AppException):
    """Bad request exception."""

    def __init__(self, message: str = "Bad request"):
        """Initialize with 400 status code."""
        super().__init__(message, status_code=400)


class ConflictException(AppException):
    """Conflict exception."""

    def __init__(self, message: str = "Conflict"):
        """Initialize with 409 status code."""
        super().__init__(message, status_code=409)


class InvalidTransitionException(BadRequestException):
    """Requested appointment status is not reachable from the current one."""

    def __init__(self, current_status: str, requested_status: str, message: str | None = None):
        """Initialize with both statuses for logging."""
        self.current_status = current_status
        self.requested_status = requested_status
        super().__init__(
            message or f"Cannot change appointment status from {current_status} to {requested_status}"
        )
