"""
Detection

Read-only probes: version comparison, tool lookup and package manager
resolution.
"""

from .version import Comparison, compare, extract_version, is_at_least, parse_version
from .tools import ToolDetector, ToolProbe
from .platform import (
    CANDIDATES,
    MANAGERS,
    ManagerKind,
    PackageManager,
    PackageManagerResolver,
    detect_os_family,
)

__all__ = [
    "Comparison",
    "compare",
    "extract_version",
    "is_at_least",
    "parse_version",
    "ToolDetector",
    "ToolProbe",
    "CANDIDATES",
    "MANAGERS",
    "ManagerKind",
    "PackageManager",
    "PackageManagerResolver",
    "detect_os_family",
]
