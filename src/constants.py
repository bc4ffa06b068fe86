"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    INVALID_VERSION = 3
    JAVA_NOT_FOUND = 4


class ConfigKeys(Enum):
    """Setting keys understood by the settings store.

    Args:
        Enum (string): Setting keys.
    """

    SERVER_VERSION = "serverVersion"
    AUTO_LATEST_SNAPSHOT = "autoLatestSnapshot"
    JAVA_HOME = "javaHome"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    # Bundled stable server release; also the default for the serverVersion setting
    DEFAULT_SERVER_VERSION = "0.11.2"
    SNAPSHOT_INDEX_URL = (
        "https://oss.sonatype.org/content/repositories/snapshots/org/scalameta/metals_2.12/"
    )
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    HTTP_CHUNK_SIZE = 8192

    ENV_JAVA_HOME = "JAVA_HOME"
    ENV_PATH = "PATH"
    ENV_LOG_LEVEL = "SERVERPIN_LOG_LEVEL"
    ENV_CONFIG = "SERVERPIN_CONFIG"

    GLOBAL_SETTINGS_FILE = "~/.config/serverpin/settings.yml"
    WORKSPACE_SETTINGS_FILE = ".serverpin.yml"

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    DATE_STAMP_FORMAT = "%Y%m%d"

    DEFAULT_SETTINGS = {
        ConfigKeys.SERVER_VERSION.value: DEFAULT_SERVER_VERSION,
        ConfigKeys.AUTO_LATEST_SNAPSHOT.value: False,
        ConfigKeys.JAVA_HOME.value: None,
    }
