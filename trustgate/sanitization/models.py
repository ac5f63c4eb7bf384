from dataclasses import dataclass
from enum import Enum

from trustgate.sanitization.exceptions import SanitizationRejectedError


class RejectionKind(str, Enum):
    """Why a text field was rejected; each kind has its own remediation."""

    LENGTH = "LENGTH"
    INJECTION = "INJECTION"
    SQL = "SQL"
    MARKUP = "MARKUP"


@dataclass(frozen=True)
class SanitizationResult:
    """Output of a sanitization layer or entry point."""

    is_valid: bool
    sanitized_value: str
    error: str | None = None
    kind: RejectionKind | None = None
    rule: str | None = None

    @classmethod
    def accept(cls, value: str) -> "SanitizationResult":
        return cls(is_valid=True, sanitized_value=value)

    def raise_for_rejection(self) -> str:
        """Return the sanitized value, or raise if the field was rejected."""
        if not self.is_valid:
            raise SanitizationRejectedError(
                self.error or "Input rejected", kind=self.kind, rule=self.rule
            )
        return self.sanitized_value
