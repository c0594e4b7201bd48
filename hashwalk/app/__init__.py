"""Application layer for hashwalk.

This layer orchestrates traversal strategies without direct filesystem I/O.
All side effects are delegated to adapters via port interfaces.
"""

__all__ = [
    "FingerprintService",
]

from hashwalk.app.fingerprint_service import FingerprintService
