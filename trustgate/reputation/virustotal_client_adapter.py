"""Reputation client adapter speaking the VirusTotal v3 HTTP+JSON protocol."""

from typing import Any

import httpx

from trustgate.reputation.base import BaseReputationClient
from trustgate.reputation.exceptions import (
    ReputationNetworkError,
    ReputationRateLimitedError,
    ReputationServiceError,
    ReputationUnauthorizedError,
)
from trustgate.reputation.models import AnalysisResult, LookupResult, VendorStats


class VirusTotalClientAdapter(BaseReputationClient):
    """Reputation adapter built on httpx."""

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str,
        timeout_seconds: int,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url,
            headers={"x-apikey": api_key, "Accept": "application/json"},
            timeout=timeout_seconds,
            transport=transport,
        )

    def lookup_file(self, digest: str) -> LookupResult:
        response = self._send("GET", f"/files/{digest}")
        if response.status_code == 404:
            return LookupResult(found=False)
        self._raise_for_status(response, "file lookup")

        attributes = self._attributes(self._parse_json(response))
        raw_stats = attributes.get("last_analysis_stats") or attributes.get("stats")
        stats = VendorStats.from_mapping(raw_stats) if isinstance(raw_stats, dict) else None
        return LookupResult(
            found=True,
            stats=stats,
            threat_label=self._threat_label(attributes),
        )

    def upload_file(self, name: str, content: bytes) -> str:
        response = self._send("POST", "/files", files={"file": (name, content)})
        self._raise_for_status(response, "file upload")

        data = self._parse_json(response).get("data")
        analysis_id = data.get("id") if isinstance(data, dict) else None
        if not isinstance(analysis_id, str) or not analysis_id:
            raise ReputationServiceError("Upload response did not contain an analysis id")
        return analysis_id

    def get_analysis(self, analysis_id: str) -> AnalysisResult:
        response = self._send("GET", f"/analyses/{analysis_id}")
        self._raise_for_status(response, "analysis poll")

        attributes = self._attributes(self._parse_json(response))
        status = attributes.get("status")
        if not isinstance(status, str):
            raise ReputationServiceError("Analysis response did not contain a status")
        raw_stats = attributes.get("stats")
        stats = VendorStats.from_mapping(raw_stats) if isinstance(raw_stats, dict) else None
        return AnalysisResult(status=status, stats=stats)

    def close(self) -> None:
        self._client.close()

    def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            return self._client.request(method, url, **kwargs)
        except httpx.TransportError as exc:
            raise ReputationNetworkError(f"Reputation service unreachable: {exc}") from exc

    @staticmethod
    def _raise_for_status(response: httpx.Response, operation: str) -> None:
        if response.status_code == 401:
            raise ReputationUnauthorizedError(f"Credential rejected during {operation}")
        if response.status_code == 429:
            raise ReputationRateLimitedError(f"Rate limit exceeded during {operation}")
        if response.status_code != 200:
            raise ReputationServiceError(
                f"Unexpected status {response.status_code} during {operation}"
            )

    @staticmethod
    def _parse_json(response: httpx.Response) -> dict[str, Any]:
        try:
            payload = response.json()
        except ValueError as exc:
            raise ReputationServiceError(f"Invalid JSON response: {exc}") from exc
        if not isinstance(payload, dict):
            raise ReputationServiceError("JSON response must be an object")
        error = payload.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else None
            raise ReputationServiceError(message or "Unknown API error")
        return payload

    @staticmethod
    def _attributes(payload: dict[str, Any]) -> dict[str, Any]:
        data = payload.get("data")
        attributes = data.get("attributes") if isinstance(data, dict) else None
        if not isinstance(attributes, dict):
            raise ReputationServiceError("Invalid API response structure")
        return attributes

    @staticmethod
    def _threat_label(attributes: dict[str, Any]) -> str | None:
        classification = attributes.get("popular_threat_classification")
        if not isinstance(classification, dict):
            return None
        label = classification.get("suggested_threat_label")
        return label if isinstance(label, str) and label else None
