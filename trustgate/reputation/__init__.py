from trustgate.reputation.base import BaseReputationClient
from trustgate.reputation.factory import ReputationScannerFactory
from trustgate.reputation.models import ReputationVerdict, ScanState, VendorStats
from trustgate.reputation.scanner import ReputationScanner

__all__ = [
    "BaseReputationClient",
    "ReputationScanner",
    "ReputationScannerFactory",
    "ReputationVerdict",
    "ScanState",
    "VendorStats",
]
