"""Filesystem probe used for search-path discovery."""

from __future__ import annotations

import os
from typing import Protocol


class FilesystemProbe(Protocol):
    """Minimal filesystem view needed to locate a java launcher."""

    def exists(self, path: str) -> bool: ...

    def resolve_link(self, path: str) -> str: ...


class LocalFilesystemProbe:
    """Probe backed by the local filesystem."""

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def resolve_link(self, path: str) -> str:
        """Follow symbolic links to the real path.

        Raises:
            OSError: If the path cannot be resolved.
        """
        return os.path.realpath(path, strict=True)
