"""Layered settings store backed by YAML files.

Values resolve from the workspace file, then the global file, then the
built-in defaults in ``Constants.DEFAULT_SETTINGS``. ``inspect`` exposes each
layer separately so callers can tell which scope a value came from.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from constants import Constants
from versioning.models import ConfigurationTarget

logger = logging.getLogger(__name__)


@dataclass
class SettingInspection:
    """Per-scope values of a single setting."""

    default_value: Any = None
    global_value: Any = None
    workspace_value: Any = None


def default_global_path() -> Path:
    override = os.environ.get(Constants.ENV_CONFIG)
    if override:
        return Path(override).expanduser()
    return Path(Constants.GLOBAL_SETTINGS_FILE).expanduser()


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load a YAML mapping; a missing, empty or malformed file is an empty mapping."""
    if not path.is_file():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        if data is not None:
            logger.warning("Ignoring settings file %s: top level is not a mapping", path)
        return {}
    return data


class YamlSettings:
    """Configuration store with default, global and workspace scopes."""

    def __init__(
        self,
        workspace_dir: Optional[os.PathLike] = None,
        *,
        global_path: Optional[os.PathLike] = None,
        defaults: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.global_path = Path(global_path) if global_path else default_global_path()
        workspace = Path(workspace_dir) if workspace_dir else Path.cwd()
        self.workspace_path = workspace / Constants.WORKSPACE_SETTINGS_FILE
        self._defaults = dict(Constants.DEFAULT_SETTINGS if defaults is None else defaults)

    def _path_for(self, target: ConfigurationTarget) -> Path:
        if target is ConfigurationTarget.GLOBAL:
            return self.global_path
        return self.workspace_path

    def inspect(self, key: str) -> SettingInspection:
        return SettingInspection(
            default_value=self._defaults.get(key),
            global_value=_load_yaml(self.global_path).get(key),
            workspace_value=_load_yaml(self.workspace_path).get(key),
        )

    def get(self, key: str, default: Any = None) -> Any:
        """Return the effective value of ``key``."""
        inspection = self.inspect(key)
        for value in (inspection.workspace_value, inspection.global_value, inspection.default_value):
            if value is not None:
                return value
        return default

    def set(self, key: str, value: Any, target: ConfigurationTarget) -> Path:
        """Write ``key`` to the file of ``target`` and return that file's path."""
        path = self._path_for(target)
        data = _load_yaml(path)
        data[key] = value
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as fh:
            yaml.safe_dump(data, fh, default_flow_style=False, sort_keys=True)
        logger.info("Updated %s in %s settings (%s)", key, target.value, path)
        return path
