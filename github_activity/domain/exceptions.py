class ActivityException(Exception):
    """Base exception for all activity-connector errors."""
    pass

class UpstreamError(ActivityException):
    """Raised when the GitHub REST API answers with a non-2xx status.

    The upstream status code is preserved so callers can mirror it.
    """
    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(message)

class ConfigurationError(ActivityException):
    """Raised when required configuration is missing or invalid at startup."""
    pass
