from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from trustgate.sanitization.models import RejectionKind


class SanitizationRejectedError(Exception):
    """Raised when a text field matches an injection, SQL or markup rule."""

    def __init__(
        self,
        message: str,
        *,
        kind: RejectionKind | None = None,
        rule: str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.rule = rule
