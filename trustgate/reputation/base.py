from abc import ABC, abstractmethod

from trustgate.reputation.models import AnalysisResult, LookupResult


class BaseReputationClient(ABC):
    """Contract for reputation-service adapters."""

    @abstractmethod
    def lookup_file(self, digest: str) -> LookupResult:
        """Look up a file by its SHA-256 hex digest.

        Raises:
            ReputationUnauthorizedError: on a rejected credential.
            ReputationRateLimitedError: when the quota is exhausted.
            ReputationNetworkError: on transport failures.
            ReputationServiceError: on any other unexpected response.
        """

    @abstractmethod
    def upload_file(self, name: str, content: bytes) -> str:
        """Submit file bytes for analysis and return the analysis identifier."""

    @abstractmethod
    def get_analysis(self, analysis_id: str) -> AnalysisResult:
        """Return the current status of a submitted analysis."""

    def close(self) -> None:
        """Release any held connections."""
