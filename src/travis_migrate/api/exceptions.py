"""Travis migration exceptions."""

from typing import Any, List, Optional


class TravisMigrateError(Exception):
    """Base exception for all migration errors."""

    pass


class APIError(TravisMigrateError):
    """Base exception for API errors."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: Optional[Any] = None,
    ):
        """Initialize API error.

        Args:
            message: Error message
            status_code: HTTP status code
            response_data: Response data from API
        """
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


class TransportError(APIError):
    """Connection, DNS or timeout failure before a response was received."""

    pass


class AuthenticationError(APIError):
    """Authentication error with the API."""

    pass


class NotFoundError(APIError):
    """Resource not found error."""

    pass


class ResponseParseError(APIError):
    """Response body could not be deserialized."""

    pass


class PaginationError(APIError):
    """Pagination metadata could not be parsed."""

    pass


class TokenAcquisitionError(TravisMigrateError):
    """An API token could not be obtained."""

    pass


class MigrationTimeoutError(TravisMigrateError):
    """Migration did not complete within the allowed number of status checks."""

    def __init__(self, message: str, slug: str, attempts: int):
        """Initialize migration timeout error.

        Args:
            message: Error message
            slug: Repository slug
            attempts: Number of status checks performed
        """
        super().__init__(message)
        self.slug = slug
        self.attempts = attempts


def error_chain(error: BaseException) -> List[str]:
    """Render an exception and its causes, outermost first."""
    messages = []
    seen = set()
    current: Optional[BaseException] = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        messages.append(str(current) or current.__class__.__name__)
        current = current.__cause__ or current.__context__
    return messages
