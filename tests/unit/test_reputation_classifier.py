import pytest

from trustgate.reputation.classifier import classify
from trustgate.reputation.models import ScanState, VendorStats


class TestVendorStats:
    def test_total_sums_all_counts(self) -> None:
        stats = VendorStats(malicious=1, suspicious=2, harmless=3, undetected=4)
        assert stats.total == 10

    def test_from_mapping_defaults_missing_counts(self) -> None:
        stats = VendorStats.from_mapping({"harmless": 70, "undetected": None})
        assert stats == VendorStats(harmless=70)

    def test_from_mapping_ignores_non_numeric(self) -> None:
        stats = VendorStats.from_mapping({"malicious": "3", "suspicious": True})
        assert stats.malicious == 0
        assert stats.suspicious == 0


class TestClassify:
    def test_clean_stats_are_safe(self) -> None:
        verdict = classify(VendorStats(harmless=70, undetected=2))
        assert verdict.safe is True
        assert verdict.threat_label is None
        assert verdict.message == "Reputation scan passed: no threats detected."

    def test_malicious_is_unsafe_with_ratio(self) -> None:
        stats = VendorStats(malicious=5, suspicious=1, harmless=60, undetected=4)
        verdict = classify(stats, threat_label="trojan.generic")
        assert verdict.safe is False
        assert verdict.message == "SECURITY ALERT: 5/70 vendors flagged this file."
        assert verdict.threat_label == "trojan.generic"
        assert verdict.vendor_stats == stats

    def test_suspicious_only_is_unsafe(self) -> None:
        verdict = classify(VendorStats(suspicious=1, harmless=10))
        assert verdict.safe is False
        assert verdict.threat_label is None

    def test_fallback_threat_label(self) -> None:
        verdict = classify(VendorStats(malicious=1))
        assert verdict.threat_label == "Malicious Content"

    def test_missing_stats_are_safe(self) -> None:
        verdict = classify(None, terminal_state=ScanState.KNOWN_VERDICT)
        assert verdict.safe is True
        assert verdict.message == "No analysis stats available."

    @pytest.mark.parametrize("field", ["malicious", "suspicious"])
    def test_raising_detections_never_restores_safety(self, field: str) -> None:
        previous_safe = True
        for count in range(0, 6):
            stats = VendorStats(harmless=50, **{field: count})
            safe = classify(stats).safe
            assert not (previous_safe is False and safe is True)
            previous_safe = safe
        assert previous_safe is False
