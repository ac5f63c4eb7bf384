from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class ScanState(str, Enum):
    """States of the reputation scan state machine."""

    HASHING = "HASHING"
    LOOKUP = "LOOKUP"
    KNOWN_VERDICT = "KNOWN_VERDICT"
    UNAVAILABLE = "UNAVAILABLE"
    UPLOAD = "UPLOAD"
    POLLING = "POLLING"
    COMPLETED = "COMPLETED"
    EXHAUSTED = "EXHAUSTED"
    ERROR = "ERROR"
    DONE = "DONE"


@dataclass(frozen=True)
class VendorStats:
    """Per-vendor verdict counts reported by the reputation service."""

    malicious: int = 0
    suspicious: int = 0
    harmless: int = 0
    undetected: int = 0

    @property
    def total(self) -> int:
        return self.malicious + self.suspicious + self.harmless + self.undetected

    @classmethod
    def from_mapping(cls, raw: Mapping[str, object]) -> "VendorStats":
        """Build from a service payload; missing or null counts become 0."""
        return cls(
            malicious=_count(raw.get("malicious")),
            suspicious=_count(raw.get("suspicious")),
            harmless=_count(raw.get("harmless")),
            undetected=_count(raw.get("undetected")),
        )


def _count(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return int(value)


@dataclass(frozen=True)
class ReputationVerdict:
    """Final, immutable outcome of one reputation scan."""

    safe: bool
    message: str
    threat_label: str | None = None
    vendor_stats: VendorStats | None = None
    terminal_state: ScanState | None = None
    digest: str = ""


@dataclass(frozen=True)
class LookupResult:
    """Response of a hash lookup: found (with stats) or unknown to the service."""

    found: bool
    stats: VendorStats | None = None
    threat_label: str | None = None


@dataclass(frozen=True)
class AnalysisResult:
    """Status of a queued analysis."""

    status: str
    stats: VendorStats | None = None

    @property
    def completed(self) -> bool:
        return self.status == "completed"


@dataclass
class ScanSession:
    """In-flight upload-and-poll bookkeeping for a single artifact."""

    analysis_id: str
    attempt: int = 0
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def elapsed_seconds(self) -> float:
        return (datetime.now(timezone.utc) - self.started_at).total_seconds()
