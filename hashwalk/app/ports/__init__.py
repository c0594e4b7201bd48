"""Port interfaces for the hashwalk application layer.

These protocol interfaces define contracts for adapters.
The application service depends on these ports, never on concrete implementations.
"""

__all__ = [
    "ResultMapping",
    "ResultSinkPort",
    "ScannerPort",
]

from hashwalk.app.ports.scanner import ResultMapping, ScannerPort
from hashwalk.app.ports.sink import ResultSinkPort
