"""Enumeration of locally installed Java runtimes."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Iterable, List, Optional

from .models import RuntimeCandidate

logger = logging.getLogger(__name__)

_WINDOWS_VENDOR_DIRS = [
    "Amazon Corretto",
    "Eclipse Adoptium",
    "Eclipse Foundation",
    "BellSoft",
    "Java",
    "Microsoft",
    "Zulu",
]


def default_roots() -> List[Path]:
    """Directories whose children are Java installations on this platform."""
    home = Path.home()
    if sys.platform.startswith("win"):
        roots = [home / ".jdks"]
        program_files = os.environ.get("ProgramFiles")
        if program_files:
            roots.extend(Path(program_files) / vendor for vendor in _WINDOWS_VENDOR_DIRS)
        return roots
    if sys.platform == "darwin":
        return [
            Path("/Library/Java/JavaVirtualMachines"),
            home / "Library" / "Java" / "JavaVirtualMachines",
            home / ".sdkman" / "candidates" / "java",
        ]
    return [
        Path("/usr/lib/jvm"),
        Path("/usr/java"),
        Path("/opt/java"),
        home / ".jdks",
        home / ".sdkman" / "candidates" / "java",
    ]


def _java_homes(root: Path) -> Iterable[Path]:
    if not root.is_dir():
        return
    for child in sorted(root.iterdir()):
        mac_home = child / "Contents" / "Home"
        if mac_home.is_dir():
            yield mac_home
        elif child.is_dir() and not child.is_symlink():
            yield child


def _executable(bin_dir: Path, name: str) -> Optional[Path]:
    for candidate in (bin_dir / name, bin_dir / f"{name}.exe"):
        if candidate.is_file():
            return candidate
    return None


def _release_version(java_home: Path) -> Optional[str]:
    release_file = java_home / "release"
    if not release_file.is_file():
        return None
    try:
        content = release_file.read_text(encoding="utf-8", errors="ignore")
    except OSError:
        return None
    for line in content.splitlines():
        if line.startswith("JAVA_VERSION="):
            return line.split("=", 1)[1].strip().strip('"')
    return None


def describe_java_home(java_home: Path) -> Optional[RuntimeCandidate]:
    """Build a candidate for one installation, or None if it is not usable."""
    bin_dir = java_home / "bin"
    if _executable(bin_dir, "java") is None:
        return None
    release = _release_version(java_home)
    if release is None:
        logger.debug("No release file under %s, skipping", java_home)
        return None
    try:
        return RuntimeCandidate.from_release(
            str(java_home),
            release,
            is_jdk=_executable(bin_dir, "javac") is not None,
        )
    except ValueError as exc:
        logger.debug("Skipping %s: %s", java_home, exc)
        return None


def scan_installed_runtimes(roots: Optional[Iterable[Path]] = None) -> List[RuntimeCandidate]:
    """Discover Java installations under ``roots`` in directory order."""
    found: List[RuntimeCandidate] = []
    seen = set()
    for root in roots if roots is not None else default_roots():
        for java_home in _java_homes(Path(root)):
            key = os.path.normcase(str(java_home))
            if key in seen:
                continue
            seen.add(key)
            candidate = describe_java_home(java_home)
            if candidate is not None:
                found.append(candidate)
    logger.debug("Found %d installed Java runtimes", len(found))
    return found
