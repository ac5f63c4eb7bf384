"""Content-type verification by magic bytes.

The declared name and MIME type of an artifact are never trusted; only the
leading bytes of the buffer decide its format.
"""

from collections.abc import Iterable
from typing import ClassVar

from trustgate.signature.models import Artifact, FileFormat, ValidationVerdict

_MIN_HEADER_LENGTH = 4
_BYTES_PER_MB = 1024 * 1024

_SIGNATURES: tuple[tuple[FileFormat, bytes], ...] = (
    (FileFormat.PDF, bytes.fromhex("25504446")),
    (FileFormat.JPEG, bytes.fromhex("FFD8FF")),
    (FileFormat.PNG, bytes.fromhex("89504E47")),
)

# RIFF container: "RIFF" <4-byte size> "WEBP"
_RIFF_MAGIC = b"RIFF"
_WEBP_MAGIC = b"WEBP"


def detect_format(content: bytes) -> FileFormat:
    """Return the format whose signature prefixes *content*, or UNKNOWN."""
    if len(content) < _MIN_HEADER_LENGTH:
        return FileFormat.UNKNOWN
    for file_format, signature in _SIGNATURES:
        if content.startswith(signature):
            return file_format
    if content.startswith(_RIFF_MAGIC) and content[8:12] == _WEBP_MAGIC:
        return FileFormat.WEBP
    return FileFormat.UNKNOWN


class SignatureVerifier:
    """Checks size and magic bytes of an artifact against an allow-list."""

    DEFAULT_FORMATS: ClassVar[frozenset[FileFormat]] = frozenset(
        {FileFormat.PDF, FileFormat.JPEG, FileFormat.PNG}
    )

    def __init__(
        self,
        max_size_bytes: int = 15 * _BYTES_PER_MB,
        accepted_formats: Iterable[FileFormat] | None = None,
    ) -> None:
        self._max_size_bytes = max_size_bytes
        self._accepted_formats = (
            frozenset(accepted_formats)
            if accepted_formats is not None
            else self.DEFAULT_FORMATS
        )

    @property
    def max_size_bytes(self) -> int:
        return self._max_size_bytes

    @property
    def accepted_formats(self) -> frozenset[FileFormat]:
        return self._accepted_formats

    def verify(self, artifact: Artifact) -> ValidationVerdict:
        """Never raises; rejection reasons for size and signature differ."""
        detected = detect_format(artifact.content)
        if artifact.size > self._max_size_bytes:
            return ValidationVerdict(
                accepted=False,
                declared_format=detected,
                reason=f"File size exceeds {self._format_limit()}MB limit.",
            )
        if detected not in self._accepted_formats:
            return ValidationVerdict(
                accepted=False,
                declared_format=detected,
                reason=(
                    f"Invalid file format. Only {self._allowed_labels()} are "
                    "allowed based on file signature."
                ),
            )
        return ValidationVerdict(accepted=True, declared_format=detected)

    def _format_limit(self) -> str:
        return f"{self._max_size_bytes / _BYTES_PER_MB:g}"

    def _allowed_labels(self) -> str:
        order = [FileFormat.PDF, FileFormat.JPEG, FileFormat.PNG, FileFormat.WEBP]
        labels = [f.label for f in order if f in self._accepted_formats]
        if len(labels) == 1:
            return labels[0]
        return f"{', '.join(labels[:-1])}, and {labels[-1]}"
