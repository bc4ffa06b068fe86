"""Selection of the Java installation used to launch the server.

Sources are consulted in a fixed order and the first one that yields a path
wins: the explicit setting, the ``JAVA_HOME`` environment variable, a java
launcher found on the executable search path (only when it is a link into a
real installation), and finally the ranked list of scanned installations.
``select_java_home`` is a pure function of its inputs; ``get_java_home``
gathers those inputs from the process environment for a session.
"""
from __future__ import annotations

import logging
import os
import sys
from typing import Callable, Iterable, List, Mapping, Optional, Sequence

from constants import Constants
from common.errors import JavaNotFoundError, RuntimeScanError
from common.logging_utils import extra_context, is_debug_enabled
from .models import RuntimeCandidate
from .probe import FilesystemProbe, LocalFilesystemProbe

logger = logging.getLogger(__name__)

Scanner = Callable[[], Iterable[RuntimeCandidate]]


def default_launcher_names() -> Sequence[str]:
    if sys.platform.startswith("win"):
        return ("java.exe", "java")
    return ("java",)


def probe_search_path(
    path_entries: Iterable[str],
    fs_probe: FilesystemProbe,
    launcher_names: Optional[Sequence[str]] = None,
) -> Optional[str]:
    """Find an installation through a linked java launcher on the search path.

    Returns the installation root (the directory above the launcher's
    ``bin``) of the first launcher whose link target differs from the link
    itself. Missing entries and unresolvable links are skipped.
    """
    names = launcher_names or default_launcher_names()
    for entry in path_entries:
        if not entry:
            continue
        for name in names:
            launcher = os.path.join(entry, name)
            if not fs_probe.exists(launcher):
                continue
            try:
                real = fs_probe.resolve_link(launcher)
            except OSError as exc:
                logger.debug("Could not resolve %s: %s", launcher, exc)
                continue
            if real and os.path.normpath(real) != os.path.normpath(launcher):
                return os.path.dirname(os.path.dirname(real))
    return None


def rank_candidates(candidates: Iterable[RuntimeCandidate]) -> List[RuntimeCandidate]:
    """Order candidates best first: JDK, then newest release, then highest patch.

    Candidates equal on all keys keep their scan order.
    """
    return sorted(candidates, key=RuntimeCandidate.rank_key, reverse=True)


def select_java_home(
    explicit_path: Optional[str],
    env_path: Optional[str],
    search_path_home: Optional[str],
    scan_results: Sequence[RuntimeCandidate],
) -> str:
    """Return the Java installation path to use.

    Raises:
        JavaNotFoundError: If no source yields a path.
    """
    for source, value in (
        ("setting", explicit_path),
        ("environment", env_path),
        ("search_path", search_path_home),
    ):
        if value:
            _log_choice(source, value)
            return value

    if scan_results:
        best = rank_candidates(scan_results)[0]
        _log_choice("scan", best.install_path, count=len(scan_results))
        return best.install_path

    raise JavaNotFoundError()


def get_java_home(
    java_home_setting: Optional[str],
    *,
    environ: Optional[Mapping[str, str]] = None,
    fs_probe: Optional[FilesystemProbe] = None,
    scanner: Optional[Scanner] = None,
) -> str:
    """Resolve the Java home for this session.

    ``environ`` defaults to ``os.environ``; the scanner is only invoked when
    the earlier sources are empty, and a failing scan counts as no results.

    Raises:
        JavaNotFoundError: If nothing usable was found.
    """
    env = os.environ if environ is None else environ
    env_java_home = env.get(Constants.ENV_JAVA_HOME)

    search_path_home = None
    if not java_home_setting and not env_java_home:
        entries = env.get(Constants.ENV_PATH, "").split(os.pathsep)
        search_path_home = probe_search_path(entries, fs_probe or LocalFilesystemProbe())

    scan_results: List[RuntimeCandidate] = []
    if not (java_home_setting or env_java_home or search_path_home):
        if scanner is None:
            from .scanner import scan_installed_runtimes  # pylint: disable=import-outside-toplevel
            scanner = scan_installed_runtimes
        try:
            scan_results = list(scanner())
        except (OSError, RuntimeScanError) as exc:
            logger.warning("Installed Java scan failed: %s", exc)
            scan_results = []

    return select_java_home(java_home_setting, env_java_home, search_path_home, scan_results)


def _log_choice(source: str, path: str, count: Optional[int] = None) -> None:
    if is_debug_enabled(logger):
        logger.debug(
            "Selected Java home",
            extra=extra_context(
                event="decision",
                component="runtime_selector",
                action="select_java_home",
                outcome=source,
                path=path,
                count=count,
            ),
        )
