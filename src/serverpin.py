"""serverpin - Java runtime selection and server upgrade advisor

    Returns:
        int: Exit code
"""
import logging
import sys

from constants import ConfigKeys, Constants, ExitCodes
from args import parse_args
from cli_config import apply_cli_overrides, setup_logging
from common.errors import JavaNotFoundError, NetworkError, VersionParseError
from common.logging_utils import extra_context, is_debug_enabled
from common.settings import YamlSettings
from runtime.selector import get_java_home
from versioning.advisor import check_server_version
from versioning.models import ServerVersion, UpdateConfigParams, UpgradeOffer
from versioning.parser import require_server_version
from versioning.snapshots import fetch_snapshot_versions

logger = logging.getLogger(__name__)


def _settings(args) -> YamlSettings:
    return YamlSettings(
        getattr(args, "WORKSPACE", None),
        global_path=getattr(args, "CONFIG", None),
    )


def run_java_home(args) -> int:
    """Print the selected Java home."""
    settings = _settings(args)
    configured = getattr(args, "JAVA_HOME", None) or settings.get(ConfigKeys.JAVA_HOME.value)
    try:
        java_home = get_java_home(configured)
    except JavaNotFoundError as exc:
        logger.error(exc.format())
        return ExitCodes.JAVA_NOT_FOUND.value
    print(java_home)
    return ExitCodes.SUCCESS.value


def run_check(args) -> int:
    """Run the upgrade advisory against the configured server version."""
    settings = _settings(args)

    def update_config(params: UpdateConfigParams) -> None:
        settings.set(params.config_section, params.version, params.configuration_target)

    def on_outdated(offer: UpgradeOffer) -> None:
        print(offer.message)
        for choice in offer.choices:
            print(f"  - {choice}")
        if getattr(args, "APPLY", False):
            offer.upgrade()
            print(f"Server version set to {offer.target_version.raw}")

    try:
        offer = check_server_version(settings, update_config, on_outdated)
    except OSError as exc:
        logger.error("Unable to write settings: %s", exc)
        return ExitCodes.FILE_ERROR.value
    if offer is None:
        print("No server upgrade available.")
    return ExitCodes.SUCCESS.value


def run_snapshots(args) -> int:
    """List the snapshot catalog newest first."""
    try:
        versions = fetch_snapshot_versions()
    except NetworkError as exc:
        logger.error("Unable to load snapshot listing: %s", exc)
        return ExitCodes.CONNECTION_ERROR.value
    ordered = sorted(versions, key=ServerVersion.sort_key, reverse=True)
    limit = getattr(args, "LIMIT", None)
    if limit is not None and limit >= 0:
        ordered = ordered[:limit]
    for version in ordered:
        print(version.raw)
    return ExitCodes.SUCCESS.value


def run_compare(args) -> int:
    """Print the sign of the ordering between two versions."""
    try:
        left = require_server_version(args.LEFT)
        right = require_server_version(args.RIGHT)
    except VersionParseError as exc:
        logger.error(exc.format())
        return ExitCodes.INVALID_VERSION.value
    diff = left.compare_to(right)
    print((diff > 0) - (diff < 0))
    return ExitCodes.SUCCESS.value


_ACTIONS = {
    "java-home": run_java_home,
    "check": run_check,
    "snapshots": run_snapshots,
    "compare": run_compare,
}


def main(argv=None) -> int:
    """Main function of the program."""
    args = parse_args(argv)
    setup_logging(args)
    apply_cli_overrides(args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(
                event="function_entry",
                component="cli",
                action=args.action,
                target=Constants.SNAPSHOT_INDEX_URL,
            ),
        )
    return _ACTIONS[args.action](args)


if __name__ == "__main__":
    sys.exit(main())
