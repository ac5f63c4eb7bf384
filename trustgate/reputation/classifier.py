from trustgate.reputation.models import ReputationVerdict, ScanState, VendorStats

_FALLBACK_THREAT_LABEL = "Malicious Content"


def classify(
    stats: VendorStats | None,
    *,
    threat_label: str | None = None,
    terminal_state: ScanState | None = None,
    digest: str = "",
) -> ReputationVerdict:
    """Turn vendor statistics into a verdict.

    Any malicious or suspicious detection makes the artifact unsafe.
    """
    if stats is None:
        return ReputationVerdict(
            safe=True,
            message="No analysis stats available.",
            terminal_state=terminal_state,
            digest=digest,
        )
    if stats.malicious > 0 or stats.suspicious > 0:
        label = threat_label or (_FALLBACK_THREAT_LABEL if stats.malicious > 0 else None)
        return ReputationVerdict(
            safe=False,
            message=f"SECURITY ALERT: {stats.malicious}/{stats.total} vendors flagged this file.",
            threat_label=label,
            vendor_stats=stats,
            terminal_state=terminal_state,
            digest=digest,
        )
    return ReputationVerdict(
        safe=True,
        message="Reputation scan passed: no threats detected.",
        threat_label=threat_label,
        vendor_stats=stats,
        terminal_state=terminal_state,
        digest=digest,
    )
