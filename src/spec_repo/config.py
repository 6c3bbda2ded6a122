"""Application configuration defaults."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from spec_repo.document import read_yaml_or_default
from spec_repo.layout.base import DEFAULT_BASEDIR

PLUGINS_DIR_ENV = "SPEC_REPO_PLUGINS_DIR"
DEFAULT_PLUGINS_DIR = "spec/plugins"
DEFAULT_CONFIG_FILE = ".spec-repo.yaml"


def resolve_plugins_dir(default: str = DEFAULT_PLUGINS_DIR) -> Path:
    """Plugins directory, taken from the environment when set.

    Relative values are resolved against the current working directory.
    """
    relative = os.environ.get(PLUGINS_DIR_ENV) or default
    return Path.cwd() / relative


@dataclass(slots=True)
class AppConfig:
    basedir: str = DEFAULT_BASEDIR
    plugins_dir: str = DEFAULT_PLUGINS_DIR
    config_file: Path = field(default_factory=lambda: Path(DEFAULT_CONFIG_FILE))

    def resolve_plugins_dir(self) -> Path:
        return resolve_plugins_dir(self.plugins_dir)


def load_config(path: Path | None = None) -> AppConfig:
    """Read the optional config file; a missing file means defaults."""
    config_file = Path(path) if path is not None else Path(DEFAULT_CONFIG_FILE)
    data = read_yaml_or_default(
        config_file,
        {},
        f"Config not found at {config_file}. Using defaults...",
    ) or {}

    config = AppConfig(config_file=config_file)
    if data.get("basedir"):
        config.basedir = str(data["basedir"])
    if data.get("plugins_dir"):
        config.plugins_dir = str(data["plugins_dir"])
    return config
