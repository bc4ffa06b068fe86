"""Data models for server versions and upgrade decisions."""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple


class ConfigurationTarget(Enum):
    """Settings scope an upgrade is written to."""
    GLOBAL = "global"
    WORKSPACE = "workspace"


@dataclass(frozen=True)
class ServerVersion:
    """A parsed release or snapshot version of the companion server.

    ``raw`` keeps the original string for display. ``commit_number`` is only
    present for snapshot builds and ``build_date`` (YYYYMMDD) only for the
    newer snapshot format.
    """
    raw: str
    major: int
    minor: int
    patch: int
    commit_number: Optional[int] = None
    build_date: Optional[str] = None

    def sort_key(self) -> Tuple[int, int, int, int]:
        """Ordering tuple; ``build_date`` does not participate."""
        return (self.major, self.minor, self.patch, self.commit_number or 0)

    def compare_to(self, other: "ServerVersion") -> int:
        """Return the first non-zero field difference, or 0 when equal in order."""
        for mine, theirs in zip(self.sort_key(), other.sort_key()):
            diff = mine - theirs
            if diff != 0:
                return diff
        return 0

    def is_snapshot(self) -> bool:
        return self.commit_number is not None

    def lt(self, other: "ServerVersion") -> bool:
        return self.compare_to(other) < 0

    def gt(self, other: "ServerVersion") -> bool:
        # Complement of lt, so equal versions are also "greater".
        return not self.lt(other)

    def __str__(self) -> str:
        return self.raw


@dataclass
class UpgradeDecision:
    """Outcome of a single advisory check."""
    recommended_version: Optional[ServerVersion] = None
    is_snapshot_offer: bool = False


@dataclass
class UpdateConfigParams:
    """Write intent handed to the configuration collaborator."""
    config_section: str
    version: str
    configuration_target: ConfigurationTarget


@dataclass
class UpgradeOffer:
    """Notification payload describing an upgrade prompt."""
    message: str
    target_version: ServerVersion
    upgrade_choice: str
    open_settings_choice: str
    dismiss_choice: str
    upgrade: Callable[[], None]

    @property
    def choices(self) -> Tuple[str, str, str]:
        return (self.upgrade_choice, self.open_settings_choice, self.dismiss_choice)


@dataclass
class ServerVersionInfo:
    """Configured server version, bundled default and the scope it came from."""
    server_version: str
    latest_server_version: str
    configuration_target: ConfigurationTarget
