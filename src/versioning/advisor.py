"""Upgrade advisory for the configured server version.

Compares the configured server version with the bundled default and, when
enabled, with the published snapshot catalog, and describes an upgrade
prompt for the caller to render. Snapshot lookups are throttled to one per
calendar day using the build date embedded in the configured version itself,
so no state is kept between runs.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Optional, Protocol

from constants import ConfigKeys, Constants
from common.errors import NetworkError
from common.logging_utils import extra_context, is_debug_enabled
from .models import (
    ConfigurationTarget,
    ServerVersion,
    ServerVersionInfo,
    UpdateConfigParams,
    UpgradeDecision,
    UpgradeOffer,
)
from .parser import parse_server_version
from .snapshots import fetch_snapshot_versions

logger = logging.getLogger(__name__)

SnapshotFetcher = Callable[[], Iterable[ServerVersion]]

OPEN_SETTINGS_CHOICE = "Open settings"
DISMISS_CHOICE = "Not now"


class SettingsReader(Protocol):
    """Read side of the configuration collaborator."""

    def get(self, key: str) -> Any: ...

    def inspect(self, key: str) -> Any: ...


def server_version_info(config: SettingsReader) -> ServerVersionInfo:
    """Read the configured version, the bundled default and the scope to update."""
    section = ConfigKeys.SERVER_VERSION.value
    computed = config.get(section)
    inspection = config.inspect(section)
    default_value = inspection.default_value
    global_value = inspection.global_value
    workspace_value = inspection.workspace_value

    if global_value and global_value != default_value:
        target = ConfigurationTarget.GLOBAL
    elif workspace_value and workspace_value != default_value:
        target = ConfigurationTarget.WORKSPACE
    else:
        target = ConfigurationTarget.WORKSPACE

    return ServerVersionInfo(
        server_version=computed,
        latest_server_version=default_value,
        configuration_target=target,
    )


def today_stamp(now: Optional[datetime] = None) -> str:
    """Current UTC calendar date as YYYYMMDD."""
    moment = now or datetime.now(timezone.utc)
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime(Constants.DATE_STAMP_FORMAT)


def should_lookup_snapshots(configured: ServerVersion, today: str) -> bool:
    """Do not look up snapshots more than once per day for a dated snapshot."""
    if configured.build_date:
        return configured.build_date != today
    return True


def decide_upgrade(
    configured: ServerVersion,
    latest: ServerVersion,
    auto_latest_snapshot: bool,
    *,
    today: str,
    fetch_snapshots: SnapshotFetcher,
) -> UpgradeDecision:
    """Pick the version to recommend, if any.

    A failed snapshot fetch aborts the whole check for this run.
    """
    is_outdated = configured.lt(latest)
    lookup = should_lookup_snapshots(configured, today)

    if auto_latest_snapshot and lookup:
        try:
            snapshots = list(fetch_snapshots())
        except Exception as exc:  # any fetch failure ends this run quietly
            logger.debug(
                "Snapshot lookup failed, skipping upgrade check: %s",
                exc,
                extra=extra_context(
                    event="decision",
                    component="advisor",
                    action="fetch_snapshots",
                    outcome="network_error" if isinstance(exc, NetworkError) else "fetch_error",
                    error_type=type(exc).__name__,
                ),
            )
            return UpgradeDecision()

        greater = sorted(
            (v for v in snapshots if configured.lt(v)),
            key=ServerVersion.sort_key,
        )
        if greater:
            chosen = greater[-1]
            return UpgradeDecision(recommended_version=chosen, is_snapshot_offer=chosen.is_snapshot())
        if is_outdated:
            return UpgradeDecision(recommended_version=latest, is_snapshot_offer=latest.is_snapshot())
        return UpgradeDecision()

    if is_debug_enabled(logger) and auto_latest_snapshot:
        logger.debug(
            "Snapshot lookup throttled for today",
            extra=extra_context(
                event="decision",
                component="advisor",
                action="should_lookup_snapshots",
                outcome="throttled",
                build_date=configured.build_date,
            ),
        )
    if is_outdated:
        return UpgradeDecision(recommended_version=latest, is_snapshot_offer=latest.is_snapshot())
    return UpgradeDecision()


def build_offer(
    decision: UpgradeDecision,
    server_version: str,
    upgrade: Callable[[], None],
) -> Optional[UpgradeOffer]:
    """Describe the prompt for a decision; None when nothing is recommended."""
    target = decision.recommended_version
    if target is None:
        return None
    if decision.is_snapshot_offer:
        message = f"New snapshot version {target.raw} is available"
    else:
        message = (
            "You are running an out-of-date version of the server. "
            f"The latest version is {target.raw}, "
            f"but you have configured a custom server version {server_version}"
        )
    return UpgradeOffer(
        message=message,
        target_version=target,
        upgrade_choice=f"Upgrade to {target.raw} now",
        open_settings_choice=OPEN_SETTINGS_CHOICE,
        dismiss_choice=DISMISS_CHOICE,
        upgrade=upgrade,
    )


def check_server_version(
    config: SettingsReader,
    update_config: Callable[[UpdateConfigParams], None],
    on_outdated: Callable[[UpgradeOffer], None],
    *,
    today: Optional[str] = None,
    fetch_snapshots: Optional[SnapshotFetcher] = None,
) -> Optional[UpgradeOffer]:
    """Run one advisory check and hand any offer to ``on_outdated``.

    Values that do not parse as versions end the check silently.

    Returns:
        The offer passed to ``on_outdated``, or None.
    """
    info = server_version_info(config)
    latest = parse_server_version(info.latest_server_version)
    current = parse_server_version(info.server_version)
    if latest is None or current is None:
        if is_debug_enabled(logger):
            logger.debug(
                "Server version not comparable, skipping upgrade check",
                extra=extra_context(
                    event="decision",
                    component="advisor",
                    action="check_server_version",
                    outcome="unparsed",
                ),
            )
        return None

    auto_latest = bool(config.get(ConfigKeys.AUTO_LATEST_SNAPSHOT.value))
    decision = decide_upgrade(
        current,
        latest,
        auto_latest,
        today=today or today_stamp(),
        fetch_snapshots=fetch_snapshots or fetch_snapshot_versions,
    )
    target = decision.recommended_version
    if target is None:
        return None

    def upgrade() -> None:
        update_config(
            UpdateConfigParams(
                config_section=ConfigKeys.SERVER_VERSION.value,
                version=target.raw,
                configuration_target=info.configuration_target,
            )
        )

    offer = build_offer(decision, info.server_version, upgrade)
    if is_debug_enabled(logger):
        logger.debug(
            "Upgrade offer: %s",
            offer.message,
            extra=extra_context(
                event="decision",
                component="advisor",
                action="check_server_version",
                outcome="offer",
                target=target.raw,
                snapshot=decision.is_snapshot_offer,
            ),
        )
    on_outdated(offer)
    return offer
