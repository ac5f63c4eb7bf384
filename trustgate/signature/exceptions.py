class SignatureError(Exception):
    """Base exception for signature verification failures."""


class SizeExceededError(SignatureError):
    """Raised when an artifact is larger than the per-file limit."""


class SignatureMismatchError(SignatureError):
    """Raised when an artifact's magic bytes match no accepted format."""
