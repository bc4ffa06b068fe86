"""Server version string parsing."""

import re
from typing import Optional

from common.errors import VersionParseError
from .models import ServerVersion

# MAJOR.MINOR.PATCH[+COMMITS-<8 char id>[-YYYYMMDD]-SNAPSHOT], matched anywhere in the text
_VERSION_RE = re.compile(
    r"(\d+)\.(\d+)\.(\d+)((\+(\d+))-[0-9a-z]{8}(-(\d{8}))?-SNAPSHOT)?"
)


def parse_server_version(value: Optional[str]) -> Optional[ServerVersion]:
    """Parse a release or snapshot version string.

    Returns None for anything that does not contain a version; never a
    partially populated value. ``raw`` is the input exactly as given.
    """
    if not value or not isinstance(value, str):
        return None
    match = _VERSION_RE.search(value)
    if match is None:
        return None

    commit_number = match.group(6)
    return ServerVersion(
        raw=value,
        major=int(match.group(1)),
        minor=int(match.group(2)),
        patch=int(match.group(3)),
        commit_number=int(commit_number) if commit_number is not None else None,
        build_date=match.group(8),
    )


def require_server_version(value: str) -> ServerVersion:
    """Parse ``value`` or raise VersionParseError."""
    parsed = parse_server_version(value)
    if parsed is None:
        raise VersionParseError(f"'{value}' is not a valid server version")
    return parsed
