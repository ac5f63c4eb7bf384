"""Entry points combining the sanitization layers for each kind of field."""

from trustgate.logging.logger import Log
from trustgate.sanitization.layers import (
    canonical_form,
    detect_code_hazards,
    detect_injection,
    encode_entities,
    normalize,
)
from trustgate.sanitization.models import RejectionKind, SanitizationResult
from trustgate.sanitization.rules import SCRIPT_RULES, SQL_RULES, first_match

SQL_REJECTION = "Security Alert: Illegal characters or SQL patterns detected."
SCRIPT_REJECTION = "Security Alert: Malicious script pattern detected."


def sanitize_input(text: str, max_length: int = 100) -> SanitizationResult:
    """Sanitize a simple text field such as a username or a short answer.

    Over-long input is truncated. Entities in the input are decoded before
    matching, so already-encoded text is judged like its raw spelling. A SQL
    or script match rejects the whole field; no partially sanitized value is
    returned.
    """
    if not text:
        return SanitizationResult.accept("")

    canonical = normalize(canonical_form(text))[:max_length]

    rule = first_match(SQL_RULES, canonical)
    if rule is not None:
        Log.warning(f"Rejected text input: SQL rule {rule.name}")
        return SanitizationResult(
            is_valid=False,
            sanitized_value="",
            error=SQL_REJECTION,
            kind=RejectionKind.SQL,
            rule=rule.name,
        )

    rule = first_match(SCRIPT_RULES, canonical)
    if rule is not None:
        Log.warning(f"Rejected text input: script rule {rule.name}")
        return SanitizationResult(
            is_valid=False,
            sanitized_value="",
            error=SCRIPT_REJECTION,
            kind=RejectionKind.MARKUP,
            rule=rule.name,
        )

    return SanitizationResult.accept(encode_entities(canonical))


def validate_code_input(code: str, max_length: int = 5000) -> SanitizationResult:
    """Validate a code-editor field.

    SQL keywords and HTML characters are legitimate in code, so no entity
    encoding is applied; execution vectors and markup tags are checked instead.
    """
    if not code:
        return SanitizationResult.accept("")

    normalized = normalize(code)
    if len(normalized) > max_length:
        return SanitizationResult(
            is_valid=False,
            sanitized_value=normalized[:max_length],
            error=f"Code exceeds maximum length of {max_length} characters.",
            kind=RejectionKind.LENGTH,
        )

    injection = detect_injection(normalized)
    if not injection.is_valid:
        Log.warning(f"Rejected code input: injection rule {injection.rule}")
        return injection

    hazards = detect_code_hazards(normalized)
    if not hazards.is_valid:
        Log.warning(f"Rejected code input: hazard rule {hazards.rule}")
        return hazards

    return SanitizationResult.accept(normalized)


def sanitize_prompt_input(text: str, max_length: int = 500) -> SanitizationResult:
    """Sanitize free text that will be sent to the AI assistant."""
    if not text:
        return SanitizationResult.accept("")

    normalized = normalize(canonical_form(text))[:max_length]
    injection = detect_injection(normalized)
    if not injection.is_valid:
        Log.warning(f"Rejected prompt input: injection rule {injection.rule}")
        return injection

    rule = first_match(SCRIPT_RULES, normalized)
    if rule is not None:
        return SanitizationResult(
            is_valid=False,
            sanitized_value="",
            error=SCRIPT_REJECTION,
            kind=RejectionKind.MARKUP,
            rule=rule.name,
        )

    return SanitizationResult.accept(encode_entities(normalized))


def escape_for_prompt(text: str) -> str:
    """Escape text for embedding inside a JSON string or prompt template."""
    return text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
