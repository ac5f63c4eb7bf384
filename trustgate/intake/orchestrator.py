"""Sequential batch intake.

Artifacts are processed one at a time, in submission order: the reputation
service is rate limited and parallel requests only produce more 429s. A
failing artifact is recorded in its log entry and the batch carries on.
"""

import time
from collections.abc import Callable, Sequence

from trustgate.config.settings import Settings
from trustgate.intake.models import AcceptedArtifact, ProcessingLogEntry, ProcessingStatus
from trustgate.intake.pipeline import IntakeContext, IntakeStep
from trustgate.intake.steps import (
    EncodePayloadStep,
    EnforceBatchLimitStep,
    ScanReputationStep,
    VerifySignatureStep,
)
from trustgate.intake.url_fetcher import UrlFetcher, name_from_url
from trustgate.logging.logger import Log
from trustgate.reputation.factory import ReputationScannerFactory
from trustgate.signature.models import Artifact, FileFormat
from trustgate.signature.verifier import SignatureVerifier

Consumer = Callable[[list[AcceptedArtifact]], None]

_BYTES_PER_MB = 1024 * 1024


class BatchIntakeOrchestrator:
    """Runs artifacts through the intake steps and delivers the accepted subset."""

    def __init__(
        self,
        *,
        file_steps: Sequence[IntakeStep],
        url_steps: Sequence[IntakeStep],
        url_fetcher: UrlFetcher,
        batch_delivery_delay_seconds: float = 1.0,
        url_delivery_delay_seconds: float = 0.8,
    ) -> None:
        self._file_steps = list(file_steps)
        self._url_steps = list(url_steps)
        self._url_fetcher = url_fetcher
        self._batch_delay = batch_delivery_delay_seconds
        self._url_delay = url_delivery_delay_seconds
        self._log: list[ProcessingLogEntry] = []

    @property
    def log(self) -> list[ProcessingLogEntry]:
        """Log entries of the most recent batch."""
        return self._log

    def process_files(
        self,
        artifacts: Sequence[Artifact],
        deliver: Consumer,
    ) -> list[AcceptedArtifact]:
        """Gate a batch of files and hand the accepted ones to *deliver*."""
        self._log = [ProcessingLogEntry(name=a.name) for a in artifacts]
        Log.info(f"Starting intake batch of {len(artifacts)} artifacts")

        accepted: list[AcceptedArtifact] = []
        accepted_bytes = 0
        for artifact, entry in zip(artifacts, self._log):
            result = self._process_one(artifact, entry, self._file_steps, accepted_bytes)
            if result is not None:
                accepted.append(result)
                accepted_bytes += artifact.size

        self._deliver(accepted, deliver, self._batch_delay)
        return accepted

    def process_url(self, url: str, deliver: Consumer) -> list[AcceptedArtifact]:
        """Fetch a single URL, gate it, and hand it to *deliver* if accepted."""
        entry = ProcessingLogEntry(name=name_from_url(url))
        self._log = [entry]
        Log.info(f"Starting intake of URL {url}")

        entry.status = ProcessingStatus.SCANNING
        try:
            artifact = self._url_fetcher.fetch(url)
        except Exception as exc:
            self._fail(entry, exc)
            return []

        result = self._process_one(artifact, entry, self._url_steps, 0)
        accepted = [result] if result is not None else []
        self._deliver(accepted, deliver, self._url_delay)
        return accepted

    def close(self) -> None:
        """Close the URL fetcher and every step; shared steps are closed once."""
        closed: set[int] = set()
        for step in [*self._file_steps, *self._url_steps]:
            if id(step) not in closed:
                closed.add(id(step))
                step.close()
        self._url_fetcher.close()

    def __enter__(self) -> "BatchIntakeOrchestrator":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _process_one(
        self,
        artifact: Artifact,
        entry: ProcessingLogEntry,
        steps: Sequence[IntakeStep],
        accepted_bytes: int,
    ) -> AcceptedArtifact | None:
        entry.status = ProcessingStatus.SCANNING
        context = IntakeContext(
            artifact=artifact,
            accepted_bytes=accepted_bytes,
        )
        try:
            for step in steps:
                context = step.run(context)
        except Exception as exc:
            self._fail(entry, exc)
            return None

        if not context.is_accepted or context.validation is None:
            self._fail(entry, RuntimeError("Artifact did not pass every intake gate"))
            return None

        mime_type = context.validation.declared_format.mime_type or "application/octet-stream"
        entry.status = ProcessingStatus.SUCCESS
        Log.info(f"Accepted {artifact.name} ({mime_type})")
        return AcceptedArtifact(
            encoded_payload=context.encoded_payload,
            mime_type=mime_type,
            name=artifact.name,
            digest=context.reputation.digest if context.reputation else "",
        )

    @staticmethod
    def _fail(entry: ProcessingLogEntry, exc: Exception) -> None:
        entry.status = ProcessingStatus.FAILED
        entry.error = f"File {entry.name}: {exc}"
        Log.error(f"Rejected {entry.name}: {exc}")

    @staticmethod
    def _deliver(accepted: list[AcceptedArtifact], deliver: Consumer, delay: float) -> None:
        if not accepted:
            Log.info("No artifacts accepted; nothing delivered")
            return
        # Terminal statuses stay visible briefly before the consumer takes over.
        time.sleep(delay)
        deliver(accepted)
        Log.info(f"Delivered {len(accepted)} accepted artifacts")


def build_orchestrator(
    settings: Settings,
    url_fetcher: UrlFetcher | None = None,
) -> BatchIntakeOrchestrator:
    """Build a BatchIntakeOrchestrator with all required collaborators."""
    max_file_bytes = settings.max_file_size_mb * _BYTES_PER_MB
    scanner = ReputationScannerFactory.create(settings)
    scan_step = ScanReputationStep(scanner)
    encode_step = EncodePayloadStep()

    file_steps: list[IntakeStep] = [
        VerifySignatureStep(SignatureVerifier(max_size_bytes=max_file_bytes)),
        EnforceBatchLimitStep(settings.max_batch_size_mb * _BYTES_PER_MB),
        scan_step,
        encode_step,
    ]
    url_steps: list[IntakeStep] = [
        VerifySignatureStep(
            SignatureVerifier(
                max_size_bytes=max_file_bytes,
                accepted_formats=[
                    FileFormat.PDF,
                    FileFormat.JPEG,
                    FileFormat.PNG,
                    FileFormat.WEBP,
                ],
            )
        ),
        scan_step,
        encode_step,
    ]
    return BatchIntakeOrchestrator(
        file_steps=file_steps,
        url_steps=url_steps,
        url_fetcher=url_fetcher or UrlFetcher(
            timeout_seconds=settings.url_fetch_timeout_seconds,
            max_size_bytes=max_file_bytes,
        ),
        batch_delivery_delay_seconds=settings.batch_delivery_delay_seconds,
        url_delivery_delay_seconds=settings.url_delivery_delay_seconds,
    )
