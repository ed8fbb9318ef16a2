"""Domain errors raised by services and rendered by the handlers in ``main``."""


class ArticleHubError(Exception):
    """Base error carrying the HTTP status it maps to."""

    status_code = 500

    def __init__(self, message: str = "Internal error"):
        self.message = message
        super().__init__(self.message)


class NotFoundError(ArticleHubError):
    """Resource not found."""

    status_code = 404

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message)


class ForbiddenError(ArticleHubError):
    """Caller is authenticated but does not own the resource."""

    status_code = 403

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message)


class ConflictError(ArticleHubError):
    status_code = 409

    def __init__(self, message: str = "Conflict"):
        super().__init__(message)


class UnauthorizedError(ArticleHubError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class ServiceUnavailableError(ArticleHubError):
    """A backing service (database, cache) could not be reached."""

    status_code = 503

    def __init__(self, message: str = "Service temporarily unavailable"):
        super().__init__(message)


class CacheUnavailableError(ServiceUnavailableError):
    """Raised by cache backends when the underlying store fails."""
