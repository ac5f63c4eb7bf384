"""Reputation scan state machine.

Flow:
1. HASHING: SHA-256 of the artifact bytes.
2. LOOKUP: query the service by digest.
   found -> KNOWN_VERDICT, 401/429 -> UNAVAILABLE, 404 -> UPLOAD.
3. UPLOAD: submit the bytes; 429 -> UNAVAILABLE.
4. POLLING: fixed delay before each status check, bounded attempts.
   completed -> COMPLETED, out of attempts -> EXHAUSTED.
5. ERROR: any other failure.

Every terminal state except a positive detection resolves to safe=True.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field

from trustgate.hashing.hasher import sha256_hex
from trustgate.logging.logger import Log
from trustgate.reputation.base import BaseReputationClient
from trustgate.reputation.classifier import classify
from trustgate.reputation.exceptions import (
    ReputationNetworkError,
    ReputationRateLimitedError,
    ReputationUnauthorizedError,
)
from trustgate.reputation.models import (
    LookupResult,
    ReputationVerdict,
    ScanSession,
    ScanState,
    VendorStats,
)
from trustgate.signature.models import Artifact


@dataclass
class _ScanRun:
    """Mutable state carried between transitions of one scan."""

    artifact: Artifact
    digest: str = ""
    lookup: LookupResult | None = None
    session: ScanSession | None = None
    analysis_stats: VendorStats | None = None
    verdict: ReputationVerdict | None = None
    error: Exception | None = None
    trail: list[ScanState] = field(default_factory=list)


class ReputationScanner:
    """Runs the lookup -> upload -> poll state machine for one artifact at a time."""

    def __init__(
        self,
        client: BaseReputationClient,
        *,
        poll_interval_seconds: float = 3.0,
        max_poll_attempts: int = 5,
    ) -> None:
        self._client = client
        self._poll_interval_seconds = poll_interval_seconds
        self._max_poll_attempts = max_poll_attempts
        self._transitions: dict[ScanState, Callable[[_ScanRun], ScanState]] = {
            ScanState.HASHING: self._hash,
            ScanState.LOOKUP: self._lookup,
            ScanState.KNOWN_VERDICT: self._known_verdict,
            ScanState.UPLOAD: self._upload,
            ScanState.POLLING: self._poll,
            ScanState.COMPLETED: self._completed,
            ScanState.EXHAUSTED: self._exhausted,
            ScanState.ERROR: self._error,
        }

    def scan(self, artifact: Artifact) -> ReputationVerdict:
        """Scan an artifact. Never raises; unavailability fails open."""
        run = _ScanRun(artifact=artifact)
        state = ScanState.HASHING
        while state is not ScanState.DONE:
            run.trail.append(state)
            try:
                state = self._transitions[state](run)
            except Exception as exc:
                if state is ScanState.ERROR:
                    raise
                Log.warning(f"Reputation scan of {artifact.name} failed in {state.value}: {exc}")
                run.error = exc
                state = ScanState.ERROR

        if run.verdict is None:
            raise RuntimeError("Reputation scan finished without a verdict")
        Log.info(
            f"Reputation scan of {artifact.name}: "
            f"{' -> '.join(s.value for s in run.trail)} (safe={run.verdict.safe})"
        )
        return run.verdict

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _hash(self, run: _ScanRun) -> ScanState:
        run.digest = sha256_hex(run.artifact.content)
        return ScanState.LOOKUP

    def _lookup(self, run: _ScanRun) -> ScanState:
        try:
            run.lookup = self._client.lookup_file(run.digest)
        except ReputationUnauthorizedError:
            Log.error("Reputation service rejected the configured API key")
            return self._unavailable(
                run, "Reputation service credentials rejected (401). Scan skipped."
            )
        except ReputationRateLimitedError:
            Log.warning("Reputation service rate limit exceeded during lookup")
            return self._unavailable(
                run, "Reputation service rate limit exceeded (429). Scan skipped."
            )
        if run.lookup.found:
            return ScanState.KNOWN_VERDICT
        Log.debug(f"Digest {run.digest} unknown to reputation service, uploading")
        return ScanState.UPLOAD

    def _known_verdict(self, run: _ScanRun) -> ScanState:
        lookup = run.lookup
        run.verdict = classify(
            lookup.stats if lookup else None,
            threat_label=lookup.threat_label if lookup else None,
            terminal_state=ScanState.KNOWN_VERDICT,
            digest=run.digest,
        )
        return ScanState.DONE

    def _upload(self, run: _ScanRun) -> ScanState:
        try:
            analysis_id = self._client.upload_file(run.artifact.name, run.artifact.content)
        except ReputationRateLimitedError:
            Log.warning("Reputation service rate limit exceeded during upload")
            return self._unavailable(
                run, "Reputation service rate limit exceeded (429). Upload skipped."
            )
        run.session = ScanSession(analysis_id=analysis_id)
        Log.info(f"Uploaded {run.artifact.name} for analysis {analysis_id}")
        return ScanState.POLLING

    def _poll(self, run: _ScanRun) -> ScanState:
        session = run.session
        if session is None:
            raise RuntimeError("Polling requires an active scan session")
        session.attempt += 1
        time.sleep(self._poll_interval_seconds)
        analysis = self._client.get_analysis(session.analysis_id)
        Log.debug(
            f"Analysis {session.analysis_id} attempt {session.attempt}/"
            f"{self._max_poll_attempts}: {analysis.status}"
        )
        if analysis.completed:
            run.analysis_stats = analysis.stats
            return ScanState.COMPLETED
        if session.attempt >= self._max_poll_attempts:
            return ScanState.EXHAUSTED
        return ScanState.POLLING

    def _completed(self, run: _ScanRun) -> ScanState:
        run.verdict = classify(
            run.analysis_stats,
            terminal_state=ScanState.COMPLETED,
            digest=run.digest,
        )
        run.session = None
        return ScanState.DONE

    def _exhausted(self, run: _ScanRun) -> ScanState:
        attempts = run.session.attempt if run.session else self._max_poll_attempts
        elapsed = run.session.elapsed_seconds() if run.session else 0.0
        Log.warning(
            f"Analysis of {run.artifact.name} still pending after {attempts} checks "
            f"({elapsed:.1f}s)"
        )
        run.verdict = ReputationVerdict(
            safe=True,
            message=(
                f"Reputation analysis still pending after {attempts} checks. "
                "Proceed with caution."
            ),
            terminal_state=ScanState.EXHAUSTED,
            digest=run.digest,
        )
        run.session = None
        return ScanState.DONE

    def _error(self, run: _ScanRun) -> ScanState:
        if isinstance(run.error, ReputationNetworkError):
            message = f"Reputation scan skipped (network blocked): {run.error}"
        else:
            message = f"Reputation service error: {run.error or 'Unknown'}"
        run.verdict = ReputationVerdict(
            safe=True,
            message=message,
            terminal_state=ScanState.ERROR,
            digest=run.digest,
        )
        run.session = None
        return ScanState.DONE

    @staticmethod
    def _unavailable(run: _ScanRun, message: str) -> ScanState:
        run.trail.append(ScanState.UNAVAILABLE)
        run.verdict = ReputationVerdict(
            safe=True,
            message=message,
            terminal_state=ScanState.UNAVAILABLE,
            digest=run.digest,
        )
        return ScanState.DONE
