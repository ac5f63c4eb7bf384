class IntakeError(Exception):
    """Base exception for intake orchestration errors."""


class UrlFetchError(IntakeError):
    """Raised when a remote URL cannot be downloaded."""


class UnsupportedMediaTypeError(IntakeError):
    """Raised when a URL serves a content type outside the allow-list."""


class BatchSizeExceededError(IntakeError):
    """Raised when accepting an artifact would exceed the aggregate batch limit."""
