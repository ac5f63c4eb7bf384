class ReputationError(Exception):
    """Base exception for all reputation-scan errors."""


class ReputationUnavailableError(ReputationError):
    """Raised when the service cannot give a verdict; callers fail open."""


class ReputationUnauthorizedError(ReputationUnavailableError):
    """Raised when the service rejects the configured credential (HTTP 401)."""


class ReputationRateLimitedError(ReputationUnavailableError):
    """Raised when the service quota is exhausted (HTTP 429)."""


class ReputationNetworkError(ReputationUnavailableError):
    """Raised when the service cannot be reached at the transport level."""


class ReputationServiceError(ReputationError):
    """Raised on unexpected status codes or malformed service responses."""


class ReputationUnsafeError(ReputationError):
    """Raised when the service reports malicious or suspicious detections."""
