from dataclasses import dataclass
from enum import Enum


class FileFormat(str, Enum):
    """Binary formats the intake pipeline knows how to recognise."""

    PDF = "PDF"
    JPEG = "JPEG"
    PNG = "PNG"
    WEBP = "WEBP"
    UNKNOWN = "UNKNOWN"

    @property
    def mime_type(self) -> str | None:
        return _MIME_TYPES.get(self)

    @property
    def label(self) -> str:
        return "JPG" if self is FileFormat.JPEG else self.value


_MIME_TYPES: dict[FileFormat, str] = {
    FileFormat.PDF: "application/pdf",
    FileFormat.JPEG: "image/jpeg",
    FileFormat.PNG: "image/png",
    FileFormat.WEBP: "image/webp",
}


@dataclass(frozen=True)
class Artifact:
    """Untrusted byte buffer with the name it was submitted under."""

    name: str
    content: bytes
    declared_mime: str | None = None

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class ValidationVerdict:
    """Outcome of signature verification for one artifact."""

    accepted: bool
    declared_format: FileFormat
    reason: str | None = None
