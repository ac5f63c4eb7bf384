from trustgate.sanitization.exceptions import SanitizationRejectedError
from trustgate.sanitization.models import RejectionKind, SanitizationResult
from trustgate.sanitization.pipeline import (
    escape_for_prompt,
    sanitize_input,
    sanitize_prompt_input,
    validate_code_input,
)

__all__ = [
    "RejectionKind",
    "SanitizationRejectedError",
    "SanitizationResult",
    "escape_for_prompt",
    "sanitize_input",
    "sanitize_prompt_input",
    "validate_code_input",
]
