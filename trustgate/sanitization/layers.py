"""The four composable sanitization layers.

1. normalize             NFKC + control-character stripping
2. detect_injection      instruction-override phrases (AI-bound text)
3. detect_code_hazards   execution URIs and high-risk tags (code fields)
4. encode_entities       HTML entity encoding (plain-text fields)
"""

import html
import unicodedata

from trustgate.sanitization.models import RejectionKind, SanitizationResult
from trustgate.sanitization.rules import (
    EXECUTION_VECTOR_RULES,
    HIGH_RISK_TAG_RULES,
    INJECTION_RULES,
    first_match,
)

_ALLOWED_CONTROL_CHARS = frozenset("\t\n\r")
# Format characters commonly used to split trigger words invisibly.
_INVISIBLE_CHARS = frozenset("\u00ad\u200b\u2060\ufeff")

_ENTITY_MAP = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
}
_ENTITY_TABLE = str.maketrans(_ENTITY_MAP)


def normalize(text: str) -> str:
    normalized = unicodedata.normalize("NFKC", text)
    return "".join(ch for ch in normalized if _is_printable(ch))


def _is_printable(ch: str) -> bool:
    if ch in _ALLOWED_CONTROL_CHARS:
        return True
    if ch in _INVISIBLE_CHARS:
        return False
    return unicodedata.category(ch) != "Cc"


def detect_injection(text: str) -> SanitizationResult:
    """Fail closed on instruction-override phrases; the text itself is kept."""
    rule = first_match(INJECTION_RULES, text)
    if rule is None:
        return SanitizationResult.accept(text)
    return SanitizationResult(
        is_valid=False,
        sanitized_value=text,
        error=f"Security Alert: Prompt injection pattern detected ({rule.name}).",
        kind=RejectionKind.INJECTION,
        rule=rule.name,
    )


def detect_code_hazards(code: str) -> SanitizationResult:
    """Block execution URIs always and high-risk tags when written as markup."""
    rule = first_match(EXECUTION_VECTOR_RULES, code)
    if rule is not None:
        return SanitizationResult(
            is_valid=False,
            sanitized_value=code,
            error=f"Security Alert: Executable URI scheme detected ({rule.name}).",
            kind=RejectionKind.MARKUP,
            rule=rule.name,
        )
    rule = first_match(HIGH_RISK_TAG_RULES, code)
    if rule is not None:
        return SanitizationResult(
            is_valid=False,
            sanitized_value=code,
            error=f"Security Alert: High-risk markup tag detected ({rule.name}).",
            kind=RejectionKind.MARKUP,
            rule=rule.name,
        )
    return SanitizationResult.accept(code)


def encode_entities(text: str) -> str:
    return text.translate(_ENTITY_TABLE)


def canonical_form(text: str) -> str:
    """Entity-decoded form used for pattern matching.

    Decoding repeats until the text stops changing, so any number of encoding
    rounds maps to the same form and encoding never changes whether a field
    is accepted.
    """
    # Every decoding round that changes the text also shortens it.
    while (decoded := html.unescape(text)) != text:
        text = decoded
    return text
