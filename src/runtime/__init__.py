"""Java runtime discovery package.

Describes installed Java runtimes, enumerates them from well-known install
locations, and selects the one used to launch the server.
"""

from .models import RuntimeCandidate
from .probe import FilesystemProbe, LocalFilesystemProbe
from .scanner import scan_installed_runtimes
from .selector import get_java_home, probe_search_path, rank_candidates, select_java_home

__all__ = [
    "RuntimeCandidate",
    "FilesystemProbe",
    "LocalFilesystemProbe",
    "scan_installed_runtimes",
    "get_java_home",
    "probe_search_path",
    "rank_candidates",
    "select_java_home",
]
