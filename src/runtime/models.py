"""Descriptors of installed Java runtimes."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Tuple

from packaging.version import InvalidVersion, Version

# 1.8.0_292, 1.8.0_292-b10, 11.0.12+7, 17, 21.0.1-ea
_UPDATE_SUFFIX_RE = re.compile(r"^(?P<base>[\d.]+)(?:_(?P<update>\d+))?")


@dataclass(frozen=True)
class RuntimeCandidate:
    """One discovered Java installation.

    ``version`` is the release triple and ``security_patch`` the patch level
    within that triple; a JDK is an installation that ships ``javac``.
    """

    install_path: str
    version: Tuple[int, int, int]
    security_patch: int
    is_jdk: bool

    def rank_key(self) -> Tuple[bool, Tuple[int, int, int], int]:
        return (self.is_jdk, self.version, self.security_patch)

    @classmethod
    def from_release(cls, install_path: str, release: str, is_jdk: bool) -> "RuntimeCandidate":
        """Build a candidate from a Java release string.

        Legacy ``1.8.0_292`` strings keep the triple ``(1, 8, 0)`` and use the
        update number as patch level; modern ``11.0.12`` strings use the
        fourth release component when present, else the third.

        Raises:
            ValueError: If ``release`` is not a Java version string.
        """
        text = (release or "").strip().strip('"')
        match = _UPDATE_SUFFIX_RE.match(text)
        if not match:
            raise ValueError(f"Unrecognised Java release '{release}'")
        try:
            parsed = Version(match.group("base").rstrip("."))
        except InvalidVersion as exc:
            raise ValueError(f"Unrecognised Java release '{release}'") from exc

        parts = list(parsed.release) + [0, 0, 0]
        triple = (parts[0], parts[1], parts[2])
        if match.group("update") is not None:
            security = int(match.group("update"))
        elif len(parsed.release) > 3:
            security = parsed.release[3]
        else:
            security = triple[2]
        return cls(install_path=install_path, version=triple, security_patch=security, is_jdk=is_jdk)
