from typing import ClassVar

from trustgate.config.settings import Settings
from trustgate.logging.logger import Log
from trustgate.reputation.base import BaseReputationClient
from trustgate.reputation.example_client_adapter import ExampleReputationClientAdapter
from trustgate.reputation.scanner import ReputationScanner
from trustgate.reputation.virustotal_client_adapter import VirusTotalClientAdapter


class ReputationScannerFactory:
    """Creates a reputation scanner backed by the configured provider."""

    PROVIDERS: ClassVar[tuple[str, ...]] = ("virustotal", "example")

    @classmethod
    def create(cls, settings: Settings) -> ReputationScanner:
        return ReputationScanner(
            cls.create_client(settings),
            poll_interval_seconds=settings.reputation_poll_interval_seconds,
            max_poll_attempts=settings.reputation_max_poll_attempts,
        )

    @classmethod
    def create_client(cls, settings: Settings) -> BaseReputationClient:
        provider = settings.reputation_provider.lower()
        if provider == "example":
            return ExampleReputationClientAdapter()
        if provider == "virustotal":
            if not settings.reputation_api_key:
                Log.warning("reputation_api_key is empty; scans will fail open")
            return VirusTotalClientAdapter(
                api_key=settings.reputation_api_key,
                base_url=settings.reputation_base_url,
                timeout_seconds=settings.reputation_timeout_seconds,
            )
        raise ValueError(
            f"Unknown reputation provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )
