"""Example reputation client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseReputationClient and register the provider in
ReputationScannerFactory.
"""

from typing import ClassVar

from trustgate.reputation.base import BaseReputationClient
from trustgate.reputation.models import AnalysisResult, LookupResult, VendorStats


class ExampleReputationClientAdapter(BaseReputationClient):
    """Example adapter that reports every file as known and clean.

    No network calls. Useful for local development and offline demos.
    """

    DEFAULT_STATS: ClassVar[VendorStats] = VendorStats(harmless=1)

    def lookup_file(self, digest: str) -> LookupResult:
        _ = digest
        return LookupResult(found=True, stats=self.DEFAULT_STATS)

    def upload_file(self, name: str, content: bytes) -> str:
        _ = content
        return f"example-{name}"

    def get_analysis(self, analysis_id: str) -> AnalysisResult:
        _ = analysis_id
        return AnalysisResult(status="completed", stats=self.DEFAULT_STATS)
