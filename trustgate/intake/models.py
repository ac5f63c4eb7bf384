from dataclasses import dataclass
from enum import Enum


class ProcessingStatus(str, Enum):
    PENDING = "PENDING"
    SCANNING = "SCANNING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"


@dataclass
class ProcessingLogEntry:
    """Per-artifact progress record, updated in place as the batch runs."""

    name: str
    status: ProcessingStatus = ProcessingStatus.PENDING
    error: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in (ProcessingStatus.SUCCESS, ProcessingStatus.FAILED)


@dataclass(frozen=True)
class AcceptedArtifact:
    """Artifact that passed every gate, ready for the consumer."""

    encoded_payload: str
    mime_type: str
    name: str
    digest: str = ""
