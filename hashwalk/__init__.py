"""hashwalk - Parallel content fingerprinting for directory trees.

Computes a fingerprint for every regular file under a root directory with
either a sequential baseline or a bounded worker-pool pipeline, and persists
the path → fingerprint mapping as JSON.
"""

__version__ = "0.1.0"
__author__ = "hashwalk Contributors"

from hashwalk.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__"]
