import base64

from trustgate.intake.exceptions import BatchSizeExceededError
from trustgate.intake.pipeline import IntakeContext, IntakeStep
from trustgate.logging.logger import Log
from trustgate.reputation.exceptions import ReputationUnsafeError
from trustgate.reputation.scanner import ReputationScanner
from trustgate.signature.exceptions import SignatureMismatchError, SizeExceededError
from trustgate.signature.verifier import SignatureVerifier

_BYTES_PER_MB = 1024 * 1024


class VerifySignatureStep(IntakeStep):
    def __init__(self, verifier: SignatureVerifier) -> None:
        self._verifier = verifier

    def run(self, context: IntakeContext) -> IntakeContext:
        verdict = self._verifier.verify(context.artifact)
        context.validation = verdict
        if not verdict.accepted:
            reason = verdict.reason or "Invalid file"
            if context.artifact.size > self._verifier.max_size_bytes:
                raise SizeExceededError(reason)
            raise SignatureMismatchError(reason)
        Log.info(
            f"Signature of {context.artifact.name} verified as "
            f"{verdict.declared_format.value}"
        )
        return context


class EnforceBatchLimitStep(IntakeStep):
    def __init__(self, max_batch_bytes: int) -> None:
        self._max_batch_bytes = max_batch_bytes

    def run(self, context: IntakeContext) -> IntakeContext:
        projected = context.accepted_bytes + context.artifact.size
        if projected > self._max_batch_bytes:
            raise BatchSizeExceededError(
                f"Batch size exceeds {self._max_batch_bytes / _BYTES_PER_MB:g}MB total limit."
            )
        return context


class ScanReputationStep(IntakeStep):
    def __init__(self, scanner: ReputationScanner) -> None:
        self._scanner = scanner

    def run(self, context: IntakeContext) -> IntakeContext:
        verdict = self._scanner.scan(context.artifact)
        context.reputation = verdict
        if not verdict.safe:
            label = f" ({verdict.threat_label})" if verdict.threat_label else ""
            raise ReputationUnsafeError(f"{verdict.message}{label}")
        return context

    def close(self) -> None:
        self._scanner.close()


class EncodePayloadStep(IntakeStep):
    def run(self, context: IntakeContext) -> IntakeContext:
        context.encoded_payload = base64.b64encode(context.artifact.content).decode("ascii")
        return context
